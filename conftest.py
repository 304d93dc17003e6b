import pytest
from datetime import date
from rest_framework.test import APIClient


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username='office', password='secret', first_name='Office', last_name='Admin')


@pytest.fixture
def api_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def school(db):
    from schools.models import School
    return School.objects.create(name='Bright Future Academy', academic_year='2025-2026')


@pytest.fixture
def classroom(school):
    from academics.models import ClassRoom
    return ClassRoom.objects.create(school=school, name='Class 10')


@pytest.fixture
def section(classroom):
    from academics.models import Section
    return Section.objects.create(classroom=classroom, name='A')


@pytest.fixture
def make_student(school, classroom):
    from academics.models import StudentProfile

    def _make(name, roll_number='', **kwargs):
        kwargs.setdefault('classroom', classroom)
        return StudentProfile.objects.create(school=school, name=name, roll_number=roll_number, **kwargs)
    return _make


@pytest.fixture
def make_exam(school, classroom):
    from academics.models import Subject
    from results.models import Examination

    def _make(subject_name, name='Mid Term', total_marks=100, **kwargs):
        subject, _ = Subject.objects.get_or_create(school=school, name=subject_name)
        kwargs.setdefault('classroom', classroom)
        kwargs.setdefault('date', date(2025, 3, 1))
        return Examination.objects.create(
            school=school, name=name, subject=subject, total_marks=total_marks, **kwargs
        )
    return _make


@pytest.fixture
def make_grade():
    from results.models import Grade

    def _make(student, examination, marks):
        return Grade.objects.create(student=student, examination=examination, marks_obtained=marks)
    return _make
