"""
Exam tabulation sheet.

Given a class and an exam name, the sheet lists every active student of the
class with their marks in each subject of that exam, the total obtained, the
total possible, the percentage, a rank and PASS/FAIL.

The computation is a pure function of three inputs (roster, subject exams and
mark records). Retrieval goes through a *source* object exposing:

    get_roster(class_id, section)        -> [StudentRosterEntry]
    get_subject_exams(class_id, exam_name) -> [SubjectExam]
    get_mark_records(exam_ids)           -> [MarkRecord]

``results.sources.ORMTabulationSource`` is the database-backed source; tests
use in-memory ones.
"""
from dataclasses import dataclass, field
from typing import Optional, Union
import logging

from .exceptions import TabulationError
from .grading import is_passing_percentage, percentage_of, quantize, result_label

logger = logging.getLogger(__name__)

PLACEHOLDER = '-'


@dataclass(frozen=True)
class StudentRosterEntry:
    id: int
    name: str
    roll_number: str = ''


@dataclass(frozen=True)
class SubjectExam:
    id: int
    subject: str
    total_marks: int


@dataclass(frozen=True)
class MarkRecord:
    student_id: int
    exam_id: int
    marks_obtained: float
    grade: str = ''


@dataclass(frozen=True)
class SubjectCell:
    marks: Union[float, str] = PLACEHOLDER
    grade: str = PLACEHOLDER

    @property
    def is_recorded(self):
        return self.marks != PLACEHOLDER


@dataclass
class StudentSummary:
    student: StudentRosterEntry
    per_subject: dict
    total_obtained: float
    total_max: int
    percentage: float
    rank: Optional[int] = None

    @property
    def is_passed(self):
        return is_passing_percentage(self.percentage)

    @property
    def result(self):
        return result_label(self.percentage)


@dataclass
class TabulationSheet:
    subjects: list = field(default_factory=list)
    students: list = field(default_factory=list)

    @property
    def is_empty(self):
        return not self.subjects


def summarize_student(student, exams, marks_by_key):
    """Collect one student's cells and totals across the subject exams."""
    per_subject = {}
    total_obtained = 0
    total_max = 0

    for exam in exams:
        mark = marks_by_key.get((student.id, exam.id))
        if mark is not None:
            per_subject[exam.subject] = SubjectCell(marks=mark.marks_obtained, grade=mark.grade)
            total_obtained += mark.marks_obtained
        else:
            per_subject[exam.subject] = SubjectCell()
        # ungraded subjects still count towards the maximum
        total_max += exam.total_marks

    percentage = quantize(percentage_of(total_obtained, total_max), 1)
    return StudentSummary(
        student=student,
        per_subject=per_subject,
        total_obtained=total_obtained,
        total_max=total_max,
        percentage=percentage,
    )


def rank_students(summaries):
    """Order by descending percentage and number the ranks 1..n.

    The sort is stable, so students with equal percentages keep their roster
    (name) order and still receive distinct ranks.
    """
    ranked = sorted(summaries, key=lambda s: -s.percentage)
    for rank, summary in enumerate(ranked, start=1):
        summary.rank = rank
    return ranked


def build_sheet(roster, exams, marks):
    """Compute the sheet from already retrieved roster, exams and marks."""
    exams = list(exams)
    if not exams:
        return TabulationSheet()

    exam_ids = {exam.id for exam in exams}
    marks_by_key = {}
    for mark in marks:
        if mark.exam_id in exam_ids:
            marks_by_key.setdefault((mark.student_id, mark.exam_id), mark)

    ordered_exams = sorted(exams, key=lambda e: e.subject)
    summaries = [summarize_student(student, ordered_exams, marks_by_key) for student in roster]

    return TabulationSheet(
        subjects=[exam.subject for exam in ordered_exams],
        students=rank_students(summaries),
    )


def generate_tabulation(source, class_id, exam_name, section=None):
    """Retrieve the inputs for ``class_id``/``exam_name`` and build the sheet.

    Returns ``None`` when either input is blank. Returns an empty sheet when
    no subject exams exist for the pair. Any retrieval failure is raised as
    ``TabulationError`` and nothing is computed.
    """
    if class_id in (None, '') or exam_name in (None, ''):
        return None

    logger.info("Generating tabulation sheet class=%s exam=%r section=%s", class_id, exam_name, section)
    try:
        roster = list(source.get_roster(class_id, section))
        exams = list(source.get_subject_exams(class_id, exam_name))
        if not exams:
            logger.info("No subject exams for class=%s exam=%r", class_id, exam_name)
            return TabulationSheet()
        marks = list(source.get_mark_records([exam.id for exam in exams]))
    except TabulationError:
        raise
    except Exception as exc:
        logger.exception("Tabulation retrieval failed for class=%s exam=%r", class_id, exam_name)
        raise TabulationError() from exc

    sheet = build_sheet(roster, exams, marks)
    logger.debug("Tabulation sheet ready: %d subjects, %d students", len(sheet.subjects), len(sheet.students))
    return sheet
