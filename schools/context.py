"""
Per-request school context.

The dashboard header, tabulation sheet and transcript all print the school
name and the academic session. That information is resolved once per request
into an immutable ``SchoolContext`` and handed explicitly to whatever renders
it, instead of living in module or thread-local state.
"""
from dataclasses import dataclass
import logging

from django.conf import settings

from .models import School

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchoolContext:
    school_id: int = None
    school_name: str = ''
    academic_year: str = ''
    logo_url: str = None
    profile_name: str = None

    def as_dict(self):
        return {
            'school_id': self.school_id,
            'school_name': self.school_name,
            'academic_year': self.academic_year,
            'logo_url': self.logo_url,
            'profile_name': self.profile_name,
        }


def _requested_school_id(request):
    """Read the school id from ``?school=`` or the ``X-School-Id`` header."""
    raw = request.query_params.get('school') if hasattr(request, 'query_params') else None
    if not raw:
        raw = request.META.get('HTTP_X_SCHOOL_ID')
    if not raw:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid school id %r", raw)
        return None


def _profile_name(request):
    user = getattr(request, 'user', None)
    if not user or not user.is_authenticated:
        return None
    return user.get_full_name() or user.username


def build_school_context(school=None, profile_name=None):
    default_name = getattr(settings, 'DEFAULT_SCHOOL_NAME', 'SchoolMS')
    default_year = getattr(settings, 'DEFAULT_ACADEMIC_YEAR', '2024-2025')
    if school is None:
        return SchoolContext(
            school_name=default_name,
            academic_year=default_year,
            profile_name=profile_name,
        )
    return SchoolContext(
        school_id=school.id,
        school_name=school.name or default_name,
        academic_year=school.academic_year or default_year,
        logo_url=school.logo.url if school.logo else None,
        profile_name=profile_name,
    )


def resolve_school_context(request):
    """Build the context for ``request``; unknown schools fall back to defaults."""
    school = None
    school_id = _requested_school_id(request)
    if school_id is not None:
        school = School.objects.filter(pk=school_id).first()
        if school is None:
            logger.warning("School %s not found, using default context", school_id)
    return build_school_context(school, profile_name=_profile_name(request))
