from academics.models import StudentProfile
from .models import Examination, Grade
from .tabulation import MarkRecord, StudentRosterEntry, SubjectExam


class ORMTabulationSource:
    """Tabulation inputs read through the Django ORM.

    Each method runs one query and returns plain records, so the engine never
    touches model instances.
    """

    def __init__(self, school=None):
        self.school = school

    def get_roster(self, class_id, section=None):
        qs = StudentProfile.objects.filter(
            classroom_id=class_id,
            status=StudentProfile.STATUS_ACTIVE,
        )
        if section:
            qs = qs.filter(section_id=section)
        if self.school is not None:
            qs = qs.filter(school=self.school)
        return [
            StudentRosterEntry(id=s['id'], name=s['name'], roll_number=s['roll_number'] or '')
            for s in qs.order_by('name', 'id').values('id', 'name', 'roll_number')
        ]

    def get_subject_exams(self, class_id, exam_name):
        qs = Examination.objects.filter(classroom_id=class_id, name=exam_name)
        if self.school is not None:
            qs = qs.filter(school=self.school)
        return [
            SubjectExam(id=e['id'], subject=e['subject__name'], total_marks=e['total_marks'])
            for e in qs.values('id', 'subject__name', 'total_marks')
        ]

    def get_mark_records(self, exam_ids):
        if not exam_ids:
            return []
        qs = Grade.objects.filter(examination_id__in=exam_ids).order_by('id')
        return [
            MarkRecord(
                student_id=g['student_id'],
                exam_id=g['examination_id'],
                marks_obtained=float(g['marks_obtained']),
                grade=g['grade'],
            )
            for g in qs.values('student_id', 'examination_id', 'marks_obtained', 'grade')
        ]
