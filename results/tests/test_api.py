import csv
import io
from decimal import Decimal

import pytest
from django.db import DatabaseError
from django.urls import reverse

from academics.models import StudentProfile
from results.models import Grade
from results.sources import ORMTabulationSource

pytestmark = pytest.mark.django_db

TABULATION_URL = '/api/results/tabulation/'


@pytest.fixture
def alice_bob(make_student, make_exam, make_grade):
    alice = make_student('Alice', '01')
    bob = make_student('Bob', '02')
    math = make_exam('Math')
    science = make_exam('Science')
    make_grade(alice, math, 90)
    make_grade(alice, science, 80)
    make_grade(bob, math, 70)
    return alice, bob, math, science


def test_grade_save_derives_percentage_letter_and_gpa(make_student, make_exam, make_grade):
    student = make_student('Selam')
    exam = make_exam('Chemistry', total_marks=50)

    grade = make_grade(student, exam, 41)
    grade.refresh_from_db()

    assert grade.percentage == Decimal('82.00')
    assert grade.grade == 'A'
    assert grade.gpa == Decimal('3.50')
    assert grade.date == exam.date


def test_tabulation_endpoint_ranks_students(api_client, classroom, alice_bob):
    response = api_client.get(TABULATION_URL, {'classroom': classroom.id, 'exam_name': 'Mid Term'})

    assert response.status_code == 200
    data = response.json()
    assert data['subjects'] == ['Math', 'Science']
    assert data['is_empty'] is False

    alice, bob = data['students']
    assert (alice['name'], alice['rank'], alice['percentage'], alice['result']) == ('Alice', 1, 85.0, 'PASS')
    assert alice['total_obtained'] == 170
    assert alice['total_max'] == 200
    assert alice['grades']['Math'] == {'marks': 90.0, 'grade': 'A+'}

    assert (bob['name'], bob['rank'], bob['percentage'], bob['result']) == ('Bob', 2, 35.0, 'FAIL')
    assert bob['grades']['Science'] == {'marks': '-', 'grade': '-'}


def test_tabulation_header_carries_school_context(api_client, school, classroom, alice_bob):
    response = api_client.get(TABULATION_URL, {
        'classroom': classroom.id, 'exam_name': 'Mid Term', 'school': school.id,
    })

    header = response.json()['header']
    assert header['school_name'] == 'Bright Future Academy'
    assert header['academic_year'] == '2025-2026'
    assert header['profile_name'] == 'Office Admin'


def test_tabulation_without_exam_schedule_is_empty(api_client, classroom, make_student):
    make_student('Alice')
    response = api_client.get(TABULATION_URL, {'classroom': classroom.id, 'exam_name': 'Final Exam'})

    assert response.status_code == 200
    data = response.json()
    assert data['subjects'] == []
    assert data['students'] == []
    assert data['is_empty'] is True


@pytest.mark.parametrize('params', [{}, {'classroom': 1}, {'exam_name': 'Mid Term'}, {'classroom': 'x', 'exam_name': 'Mid Term'}])
def test_tabulation_rejects_missing_or_invalid_params(api_client, params):
    response = api_client.get(TABULATION_URL, params)
    assert response.status_code == 400
    assert 'detail' in response.json()


def test_tabulation_retrieval_failure_returns_generic_error(api_client, classroom, alice_bob, monkeypatch):
    def broken(self, exam_ids):
        raise DatabaseError('connection reset')

    monkeypatch.setattr(ORMTabulationSource, 'get_mark_records', broken)
    response = api_client.get(TABULATION_URL, {'classroom': classroom.id, 'exam_name': 'Mid Term'})

    assert response.status_code == 503
    assert response.json() == {'detail': 'Failed to generate tabulation sheet'}


def test_tabulation_skips_inactive_students_and_filters_section(api_client, classroom, section, make_student, make_exam, make_grade):
    exam = make_exam('Math')
    in_section = make_student('Hana', '05', section=section)
    other = make_student('Abel', '06')
    make_student('Zufan', '07', section=section, status='alumni')
    make_grade(in_section, exam, 55)
    make_grade(other, exam, 95)

    all_students = api_client.get(TABULATION_URL, {'classroom': classroom.id, 'exam_name': 'Mid Term'}).json()
    assert [s['name'] for s in all_students['students']] == ['Abel', 'Hana']

    one_section = api_client.get(TABULATION_URL, {
        'classroom': classroom.id, 'exam_name': 'Mid Term', 'section': section.id,
    }).json()
    assert [s['name'] for s in one_section['students']] == ['Hana']
    assert one_section['students'][0]['rank'] == 1


def test_tabulation_csv_export(api_client, classroom, alice_bob):
    response = api_client.get(reverse('tabulation-export-csv'), {'classroom': classroom.id, 'exam_name': 'Mid Term'})

    assert response.status_code == 200
    assert response['Content-Type'].startswith('text/csv')
    rows = list(csv.reader(io.StringIO(response.content.decode('utf-8-sig'))))
    assert rows[0] == ['Rank', 'Roll No', 'Student Name', 'Math', 'Science', 'Total', '%', 'Result']
    assert rows[1][:3] == ['1', '01', 'Alice']
    assert rows[1][-2:] == ['85.0', 'PASS']
    assert rows[2][4] == '-'


def test_roster_source_orders_active_students_by_name(classroom, make_student):
    make_student('Yonas', '3')
    make_student('Abeba', '1')
    make_student('Kidus', '2', status='suspended')

    roster = ORMTabulationSource().get_roster(classroom.id)
    assert [(r.name, r.roll_number) for r in roster] == [('Abeba', '1'), ('Yonas', '3')]


def test_exam_names_endpoint(api_client, classroom, make_exam):
    make_exam('Math', name='Mid Term')
    make_exam('Science', name='Mid Term')
    make_exam('Math', name='Final Exam')

    response = api_client.get('/api/results/examinations/names/', {'classroom': classroom.id})
    assert response.json() == ['Final Exam', 'Mid Term']


def test_create_grade_validates_marks_range(api_client, make_student, make_exam):
    student = make_student('Alice')
    exam = make_exam('Math', total_marks=50)

    bad = api_client.post('/api/results/grades/', {
        'student_id': student.id, 'examination_id': exam.id, 'marks_obtained': 60,
    }, format='json')
    assert bad.status_code == 400
    assert 'marks_obtained' in bad.json()

    good = api_client.post('/api/results/grades/', {
        'student_id': student.id, 'examination_id': exam.id, 'marks_obtained': 45,
    }, format='json')
    assert good.status_code == 201
    assert good.json()['grade'] == 'A+'
    assert good.json()['subject'] == 'Math'


def test_bulk_grades_upserts_and_reports_errors(api_client, school, make_student, make_exam):
    from academics.models import ClassRoom

    exam = make_exam('Math')
    alice = make_student('Alice')
    other_class = ClassRoom.objects.create(school=school, name='Class 9')
    outsider = make_student('Outsider', classroom=other_class)
    Grade.objects.create(student=alice, examination=exam, marks_obtained=10)

    response = api_client.post(f'/api/results/examinations/{exam.id}/bulk_grades/', {
        'grades': [
            {'student_id': alice.id, 'marks_obtained': 88},
            {'student_id': outsider.id, 'marks_obtained': 50},
            {'student_id': alice.id, 'marks_obtained': 150},
            {'marks_obtained': 20},
        ]
    }, format='json')

    assert response.status_code == 200
    data = response.json()
    assert data['created'] == 0
    assert data['updated'] == 1
    assert [e['index'] for e in data['errors']] == [1, 2, 3]
    assert Grade.objects.get(student=alice, examination=exam).marks_obtained == Decimal('88.00')


def test_transcript_endpoint(api_client, school, make_student, make_exam, make_grade):
    student = make_student('Alice', '01')
    math = make_exam('Math')
    science = make_exam('Science')
    final_math = make_exam('Math', name='Final Exam')
    make_grade(student, math, 80)
    make_grade(student, science, 60)
    make_grade(student, final_math, 90)

    response = api_client.get(f'/api/results/transcript/{student.id}/', {'school': school.id})

    assert response.status_code == 200
    data = response.json()
    assert data['student']['name'] == 'Alice'
    assert data['header']['school_name'] == 'Bright Future Academy'
    assert [g['exam_name'] for g in data['groups']] == ['Mid Term', 'Final Exam']
    assert data['groups'][0]['total_obtained'] == 140
    assert data['total_obtained'] == 230
    assert data['total_max'] == 300
    assert data['percentage'] == 76.67
    assert data['cgpa'] == 3.33
    assert data['result'] == 'PASSED'


def test_transcript_for_unknown_student_is_404(api_client, db):
    assert api_client.get('/api/results/transcript/9999/').status_code == 404


def test_grade_summaries_keep_their_own_pass_rules(api_client, make_student, make_exam, make_grade):
    exam = make_exam('Math')
    make_grade(make_student('Abel'), exam, 40)   # C, 1.5 points
    make_grade(make_student('Beza'), exam, 85)   # A, 3.5 points
    make_grade(make_student('Caleb'), exam, 20)  # F, 0.0 points

    summary = api_client.get('/api/results/grades/summary/').json()
    assert summary == {'average_gpa': 1.67, 'pass_rate': 66.7, 'excellence_rate': 33.3}

    results = api_client.get('/api/results/grades/results_summary/').json()
    assert results['pass_rate'] == 33.3
    assert results['top_student'] == {'name': 'Beza', 'score': 85.0}
    assert results['highest_score'] == 85.0
    assert results['exams_published'] == 1
    assert results['average_gpa'] == 1.67


def test_summaries_of_no_grades(api_client, db):
    assert api_client.get('/api/results/grades/summary/').json() == {
        'average_gpa': 0.0, 'pass_rate': 0.0, 'excellence_rate': 0.0,
    }
    assert api_client.get('/api/results/grades/results_summary/').json()['top_student'] == {'name': 'N/A', 'score': 0.0}


def test_endpoints_require_authentication(db, classroom):
    from rest_framework.test import APIClient

    response = APIClient().get(TABULATION_URL, {'classroom': classroom.id, 'exam_name': 'Mid Term'})
    assert response.status_code == 401


def test_student_status_default_is_active(make_student):
    assert make_student('New').status == StudentProfile.STATUS_ACTIVE


@pytest.mark.parametrize('params', [
    {'classroom': 0, 'exam_name': 'Mid Term'},
    {'classroom': -3, 'exam_name': 'Mid Term'},
    {'classroom': 1, 'exam_name': 'Mid Term', 'section': 0},
])
@pytest.mark.parametrize('url', [TABULATION_URL, TABULATION_URL + 'export_csv/'])
def test_tabulation_rejects_non_positive_ids(api_client, url, params):
    response = api_client.get(url, params)
    assert response.status_code == 400
    assert 'detail' in response.json()


def test_lowering_total_marks_below_recorded_marks_is_rejected(api_client, classroom, alice_bob):
    _, _, math, _ = alice_bob

    response = api_client.patch(f'/api/results/examinations/{math.id}/', {'total_marks': 50}, format='json')

    assert response.status_code == 400
    assert 'total_marks' in response.json()
    math.refresh_from_db()
    assert math.total_marks == 100


def test_changing_total_marks_regrades_recorded_marks(api_client, alice_bob):
    alice, _, math, _ = alice_bob

    response = api_client.patch(f'/api/results/examinations/{math.id}/', {'total_marks': 200}, format='json')

    assert response.status_code == 200
    grade = Grade.objects.get(student=alice, examination=math)
    assert grade.percentage == Decimal('45.00')
    assert grade.grade == 'C'
    assert grade.gpa == Decimal('1.50')


def test_sheet_totals_never_exceed_maximum(api_client, classroom, alice_bob):
    _, _, math, science = alice_bob
    api_client.patch(f'/api/results/examinations/{math.id}/', {'total_marks': 90}, format='json')
    api_client.patch(f'/api/results/examinations/{science.id}/', {'total_marks': 60}, format='json')

    data = api_client.get(TABULATION_URL, {'classroom': classroom.id, 'exam_name': 'Mid Term'}).json()

    assert data['students']
    for row in data['students']:
        assert row['total_obtained'] <= row['total_max']
        assert row['percentage'] <= 100
