class TabulationError(Exception):
    """Raised when the data behind a tabulation sheet could not be retrieved.

    The original failure is chained as ``__cause__``.
    """

    default_detail = 'Failed to generate tabulation sheet'

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)
