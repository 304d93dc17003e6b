"""
Cumulative academic transcript for one student.

Grades are grouped by exam name in the order they are first met (callers pass
them oldest first), each group gets its own subtotal, and the whole record is
summarised with an overall percentage, CGPA and final result.
"""
from dataclasses import dataclass, field

from .grading import GRADE_LEGEND, is_passing_percentage, percentage_of, quantize


@dataclass(frozen=True)
class TranscriptLine:
    exam_name: str
    subject: str
    marks_obtained: float
    total_marks: int
    grade: str
    gpa: float
    percentage: float = 0.0
    date: object = None


@dataclass
class ExamGroup:
    exam_name: str
    lines: list = field(default_factory=list)

    @property
    def total_obtained(self):
        return sum(line.marks_obtained for line in self.lines)

    @property
    def total_max(self):
        return sum(line.total_marks for line in self.lines)

    @property
    def percentage(self):
        return quantize(percentage_of(self.total_obtained, self.total_max), 1)


@dataclass
class Transcript:
    groups: list = field(default_factory=list)
    total_obtained: float = 0
    total_max: int = 0
    percentage: float = 0.0
    cgpa: float = 0.0
    legend: list = field(default_factory=lambda: list(GRADE_LEGEND))

    @property
    def is_passed(self):
        return is_passing_percentage(self.percentage)

    @property
    def result(self):
        return 'PASSED' if self.is_passed else 'FAILED'


def line_from_grade(grade):
    exam = grade.examination
    return TranscriptLine(
        exam_name=exam.name,
        subject=exam.subject.name,
        marks_obtained=float(grade.marks_obtained),
        total_marks=exam.total_marks,
        grade=grade.grade,
        gpa=float(grade.gpa),
        percentage=float(grade.percentage),
        date=grade.date,
    )


def build_transcript(lines):
    groups = {}
    for line in lines:
        groups.setdefault(line.exam_name, ExamGroup(exam_name=line.exam_name)).lines.append(line)

    all_lines = [line for group in groups.values() for line in group.lines]
    if not all_lines:
        return Transcript()

    total_obtained = sum(line.marks_obtained for line in all_lines)
    total_max = sum(line.total_marks for line in all_lines)
    cgpa = sum(line.gpa for line in all_lines) / len(all_lines)

    return Transcript(
        groups=list(groups.values()),
        total_obtained=total_obtained,
        total_max=total_max,
        percentage=quantize(percentage_of(total_obtained, total_max), 2),
        cgpa=quantize(cgpa, 2),
    )
