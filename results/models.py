from decimal import Decimal
from django.db import models
from schools.models import School
from academics.models import ClassRoom, Section, Subject, StudentProfile
from .grading import grade_for_percentage, percentage_of, quantize


class Examination(models.Model):
    """One subject paper of a named exam (e.g. "Mid Term" Mathematics) for a class"""
    STATUS_CHOICES = [
        ('upcoming', 'Upcoming'),
        ('ongoing', 'Ongoing'),
        ('completed', 'Completed'),
    ]

    school = models.ForeignKey(School, on_delete=models.CASCADE, related_name='examinations')
    name = models.CharField(max_length=200)
    subject = models.ForeignKey(Subject, on_delete=models.CASCADE, related_name='examinations')
    classroom = models.ForeignKey(ClassRoom, on_delete=models.CASCADE, related_name='examinations')
    section = models.ForeignKey(Section, on_delete=models.SET_NULL, null=True, blank=True, related_name='examinations')
    date = models.DateField(null=True, blank=True)
    total_marks = models.PositiveIntegerField(default=100)
    passing_marks = models.PositiveIntegerField(default=33)
    duration = models.CharField(max_length=50, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='upcoming')
    semester = models.CharField(max_length=50, blank=True)

    class Meta:
        unique_together = ('classroom', 'name', 'subject')
        ordering = ['-date', 'name']
        indexes = [
            models.Index(fields=['school', 'classroom']),
            models.Index(fields=['classroom', 'name']),
            models.Index(fields=['date']),
        ]

    def __str__(self):
        return f"{self.name} - {self.subject.name} - {self.classroom.name}"


class Grade(models.Model):
    """Marks recorded for one student in one subject exam"""
    examination = models.ForeignKey(Examination, on_delete=models.CASCADE, related_name='grades')
    student = models.ForeignKey(StudentProfile, on_delete=models.CASCADE, related_name='grades')
    marks_obtained = models.DecimalField(max_digits=6, decimal_places=2)

    # Auto-calculated
    percentage = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    grade = models.CharField(max_length=5, blank=True)
    gpa = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    date = models.DateField(null=True, blank=True)

    remarks = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True, null=True)

    class Meta:
        unique_together = ('examination', 'student')
        ordering = ['date', 'id']
        indexes = [
            models.Index(fields=['examination', 'student']),
            models.Index(fields=['student']),
        ]

    def save(self, *args, **kwargs):
        percentage = percentage_of(self.marks_obtained, self.examination.total_marks)
        self.grade, gpa = grade_for_percentage(percentage)
        self.percentage = Decimal(str(quantize(percentage, 2)))
        self.gpa = Decimal(str(gpa))
        if self.date is None:
            self.date = self.examination.date
        super().save(*args, **kwargs)

    @property
    def total_marks(self):
        return self.examination.total_marks

    def __str__(self):
        return f"{self.student.name} - {self.examination.subject.name} - {self.grade}"
