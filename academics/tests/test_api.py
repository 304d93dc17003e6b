import csv
import io

import pytest

from academics.models import ClassRoom, Section

pytestmark = pytest.mark.django_db


def test_classroom_roster_lists_active_students_by_name(api_client, classroom, section, make_student):
    make_student('Yonas', '3', section=section)
    make_student('Abeba', '1')
    make_student('Kidus', '2', status='inactive')

    response = api_client.get(f'/api/academics/classrooms/{classroom.id}/roster/')
    assert response.status_code == 200
    assert response.json() == [
        {'id': response.json()[0]['id'], 'name': 'Abeba', 'roll_number': '1'},
        {'id': response.json()[1]['id'], 'name': 'Yonas', 'roll_number': '3'},
    ]

    in_section = api_client.get(f'/api/academics/classrooms/{classroom.id}/roster/', {'section': section.id})
    assert [r['name'] for r in in_section.json()] == ['Yonas']


def test_classroom_student_count_ignores_inactive(api_client, classroom, make_student):
    make_student('Abeba')
    make_student('Kidus', status='alumni')

    data = api_client.get(f'/api/academics/classrooms/{classroom.id}/').json()
    assert data['student_count'] == 1


def test_student_section_must_belong_to_class(api_client, school, classroom):
    other_class = ClassRoom.objects.create(school=school, name='Class 9')
    foreign_section = Section.objects.create(classroom=other_class, name='B')

    response = api_client.post('/api/academics/students/', {
        'school_id': school.id,
        'name': 'Hana',
        'classroom_id': classroom.id,
        'section_id': foreign_section.id,
    }, format='json')

    assert response.status_code == 400
    assert 'section_id' in response.json()


def test_create_student(api_client, school, classroom, section):
    response = api_client.post('/api/academics/students/', {
        'school_id': school.id,
        'name': 'Hana',
        'classroom_id': classroom.id,
        'section_id': section.id,
        'roll_number': '12',
    }, format='json')

    assert response.status_code == 201
    data = response.json()
    assert data['classroom_name'] == 'Class 10'
    assert data['section_name'] == 'A'
    assert data['status'] == 'active'


def test_students_export_csv(api_client, section, make_student):
    make_student('Abeba', '1', section=section, guardian_name='Tsehay')
    make_student('Yonas', '2')

    response = api_client.get('/api/academics/students/export_csv/')

    assert response.status_code == 200
    assert 'students_export.csv' in response['Content-Disposition']
    rows = list(csv.reader(io.StringIO(response.content.decode('utf-8-sig'))))
    assert rows[0][:3] == ['Serial', 'Student Name', 'Class']
    assert rows[1] == ['1', 'Abeba', 'Class 10', 'A', '1', 'active', 'Tsehay', '']
    assert rows[2][:4] == ['2', 'Yonas', 'Class 10', '']


def test_roster_rejects_non_numeric_section(api_client, classroom):
    response = api_client.get(f'/api/academics/classrooms/{classroom.id}/roster/', {'section': 'abc'})
    assert response.status_code == 400
    assert response.json() == {'detail': 'section must be a numeric id'}
