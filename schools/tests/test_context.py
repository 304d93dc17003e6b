from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from django.utils import timezone

from academics.models import Teacher
from finance.models import Expense, Fee, Income
from schools.context import SchoolContext, build_school_context

CONTEXT_URL = '/api/schools/context/'


def test_build_context_without_school_uses_defaults(settings):
    settings.DEFAULT_SCHOOL_NAME = 'Hillside School'
    settings.DEFAULT_ACADEMIC_YEAR = '2023-2024'
    context = build_school_context(profile_name='clerk')

    assert context == SchoolContext(
        school_name='Hillside School', academic_year='2023-2024', profile_name='clerk',
    )


def test_build_context_for_school_fills_blank_year(settings):
    settings.DEFAULT_ACADEMIC_YEAR = '2030-2031'
    school = SimpleNamespace(id=7, name='Riverside', academic_year='', logo=None)

    context = build_school_context(school)

    assert context.school_id == 7
    assert context.school_name == 'Riverside'
    assert context.academic_year == '2030-2031'
    assert context.logo_url is None


def test_context_is_immutable():
    context = build_school_context()
    with pytest.raises(AttributeError):
        context.school_name = 'Other'


@pytest.mark.django_db
def test_context_endpoint_by_query_param(api_client, school):
    data = api_client.get(CONTEXT_URL, {'school': school.id}).json()

    assert data['school_id'] == school.id
    assert data['school_name'] == 'Bright Future Academy'
    assert data['academic_year'] == '2025-2026'
    assert data['profile_name'] == 'Office Admin'


@pytest.mark.django_db
def test_context_endpoint_by_header(api_client, school):
    data = api_client.get(CONTEXT_URL, HTTP_X_SCHOOL_ID=str(school.id)).json()
    assert data['school_name'] == 'Bright Future Academy'


@pytest.mark.django_db
@pytest.mark.parametrize('school_param', ['abc', '99999'])
def test_context_endpoint_falls_back_for_unknown_school(api_client, settings, school_param):
    settings.DEFAULT_SCHOOL_NAME = 'SchoolMS'
    data = api_client.get(CONTEXT_URL, {'school': school_param}).json()

    assert data['school_id'] is None
    assert data['school_name'] == 'SchoolMS'


@pytest.mark.django_db
def test_dashboard_stats(api_client, school, classroom, make_student):
    alice = make_student('Alice')
    make_student('Bob')
    make_student('Old Timer', status='alumni')
    Teacher.objects.create(school=school, name='Meron', salary=Decimal('100'))
    Income.objects.create(school=school, title='Grant', amount=Decimal('5000'))
    Expense.objects.create(school=school, title='Repairs', amount=Decimal('1200'))

    today = timezone.localdate()
    Fee.objects.create(school=school, student=alice, amount=Decimal('300'), due_date=today,
                       status=Fee.STATUS_PAID, payment_date=today)
    Fee.objects.create(school=school, student=alice, amount=Decimal('300'), due_date=date(2020, 1, 1),
                       status=Fee.STATUS_PAID, payment_date=today - timedelta(days=90))

    response = api_client.get('/api/dashboard-stats/', {'school_id': school.id})

    assert response.status_code == 200
    data = response.json()
    assert data['students_count'] == 2
    assert data['teachers_count'] == 1
    assert data['classes_count'] == 1
    assert data['total_income'] == 5000.0
    assert data['total_expenses'] == 1200.0
    assert data['net_balance'] == 3800.0
    assert len(data['fee_data']) == 1
    assert data['class_distribution'] == [{'classroom__name': 'Class 10', 'count': 2}]


@pytest.mark.django_db
def test_dashboard_stats_requires_known_school(api_client):
    assert api_client.get('/api/dashboard-stats/').status_code == 400
    assert api_client.get('/api/dashboard-stats/', {'school_id': 'x'}).status_code == 400
    assert api_client.get('/api/dashboard-stats/', {'school_id': 424242}).status_code == 404
