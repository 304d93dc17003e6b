"""
Grading scale and pass/fail rules.

Two pass thresholds are in use and are intentionally kept apart:
``PASS_PERCENTAGE`` decides PASS/FAIL on tabulation sheets, transcripts and the
grades overview, while ``PASS_GPA`` is what the results overview counts as a
pass when computing its pass rate.
"""
from decimal import Decimal, ROUND_HALF_UP

PASS_PERCENTAGE = 40
PASS_GPA = 1.5
EXCELLENCE_PERCENTAGE = 80

# (minimum percentage, letter, grade point), highest band first
GRADE_SCALE = [
    (90, 'A+', 4.0),
    (80, 'A', 3.5),
    (70, 'B+', 3.0),
    (60, 'B', 2.5),
    (50, 'C+', 2.0),
    (40, 'C', 1.5),
    (33, 'D', 0.0),
]
FAIL_GRADE = ('F', 0.0)

# Printed under transcripts
GRADE_LEGEND = [
    'A+ (90-100%) : 4.0',
    'A (80-89%) : 3.5',
    'B+ (70-79%) : 3.0',
    'B (60-69%) : 2.5',
    'C+ (50-59%) : 2.0',
    'C (40-49%) : 1.5',
    'D (33-39%) : 1.0',
    'F (0-32%) : 0.0',
]


def percentage_of(obtained, total):
    if not total or total <= 0:
        return 0.0
    return float(obtained) / float(total) * 100


def grade_for_percentage(percentage):
    """Return ``(letter, gpa)`` for a percentage score."""
    for minimum, letter, gpa in GRADE_SCALE:
        if percentage >= minimum:
            return letter, gpa
    return FAIL_GRADE


def is_passing_percentage(percentage):
    return percentage >= PASS_PERCENTAGE


def is_passing_gpa(gpa):
    return float(gpa) > PASS_GPA


def result_label(percentage):
    return 'PASS' if is_passing_percentage(percentage) else 'FAIL'


def quantize(value, places=2):
    """Round half-up to ``places`` decimals, as the dashboard displays numbers."""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))
