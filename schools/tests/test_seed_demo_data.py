import pytest
from django.core.management import CommandError, call_command

from academics.models import StudentProfile
from finance.models import Fee, Payroll
from results.models import Examination, Grade
from results.sources import ORMTabulationSource
from results.tabulation import generate_tabulation
from schools.models import School

pytestmark = pytest.mark.django_db


def test_seed_creates_a_school_that_can_be_tabulated():
    call_command(
        'seed_demo_data', '--create-school', '--school-name', 'Demo', '--students', '8',
        '--classes', '2', '--subjects', '3', '--teachers', '2', '--seed', '7',
    )

    school = School.objects.get(name='Demo')
    assert StudentProfile.objects.filter(school=school).count() == 8
    assert Examination.objects.filter(school=school).count() == 2 * 2 * 3
    assert Grade.objects.exists()
    assert Fee.objects.filter(school=school).count() == 8
    assert Payroll.objects.filter(school=school).count() == 2

    classroom = StudentProfile.objects.filter(school=school).first().classroom
    sheet = generate_tabulation(ORMTabulationSource(school), classroom.id, 'Mid Term')
    assert len(sheet.subjects) == 3
    assert [s.rank for s in sheet.students] == list(range(1, len(sheet.students) + 1))


def test_seed_requires_a_school():
    with pytest.raises(CommandError):
        call_command('seed_demo_data')
