import csv
import io

from django import forms
from django.contrib import admin, messages
from django.http import HttpResponseRedirect
from django.shortcuts import get_object_or_404
from django.template.response import TemplateResponse
from django.urls import path, reverse
from django.utils.html import format_html

from academics.models import StudentProfile
from .models import Examination, Grade

MAX_REPORTED_ERRORS = 10
CSV_TEMPLATE = "roll_number,marks_obtained\n1,75\n2,68"


def import_grades_csv(exam, text):
    """Upsert grades for ``exam`` from CSV text with roll_number,marks_obtained columns.

    Returns ``(created, updated, errors)``.
    """
    created = updated = 0
    errors = []

    # row 1 is the header
    for line_no, row in enumerate(csv.DictReader(io.StringIO(text)), start=2):
        roll = (row.get('roll_number') or '').strip()
        raw_marks = (row.get('marks_obtained') or '').strip()
        if not roll or not raw_marks:
            errors.append(f"Row {line_no}: Missing roll_number or marks_obtained")
            continue

        try:
            marks = float(raw_marks)
        except ValueError:
            errors.append(f"Row {line_no}: Invalid marks '{raw_marks}'")
            continue
        if not 0 <= marks <= exam.total_marks:
            errors.append(f"Row {line_no}: Marks must be between 0 and {exam.total_marks}")
            continue

        student = (
            StudentProfile.objects
            .filter(school=exam.school, classroom=exam.classroom, roll_number=roll)
            .first()
        )
        if student is None:
            errors.append(f"Row {line_no}: Student with roll {roll} not found")
            continue

        _, was_created = Grade.objects.update_or_create(
            examination=exam, student=student, defaults={'marks_obtained': marks}
        )
        if was_created:
            created += 1
        else:
            updated += 1

    return created, updated, errors


class GradeImportForm(forms.Form):
    file = forms.FileField(label='CSV file')


@admin.register(Examination)
class ExaminationAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'subject', 'school', 'classroom', 'section', 'date', 'total_marks', 'passing_marks', 'status', 'import_link']
    list_filter = ['school', 'status', 'classroom', 'date']
    search_fields = ['name', 'subject__name']
    date_hierarchy = 'date'

    @admin.display(description='Grades')
    def import_link(self, obj):
        url = reverse('admin:results_examination_import_grades', args=[obj.pk])
        return format_html('<a class="button" href="{}">Import CSV</a>', url)

    def get_urls(self):
        return [
            path(
                '<int:exam_id>/import-grades/',
                self.admin_site.admin_view(self.import_grades_view),
                name='results_examination_import_grades',
            ),
        ] + super().get_urls()

    def import_grades_view(self, request, exam_id):
        exam = get_object_or_404(Examination.objects.select_related('subject', 'classroom'), pk=exam_id)
        form = GradeImportForm(request.POST or None, request.FILES or None)

        if request.method == 'POST' and form.is_valid():
            try:
                text = form.cleaned_data['file'].read().decode('utf-8-sig')
            except UnicodeDecodeError:
                messages.error(request, 'Import failed: file is not UTF-8 encoded')
                return HttpResponseRedirect(request.path)

            created, updated, errors = import_grades_csv(exam, text)
            messages.success(request, f"Imported grades for {exam}: {created} created, {updated} updated")
            for error in errors[:MAX_REPORTED_ERRORS]:
                messages.warning(request, error)
            return HttpResponseRedirect(reverse('admin:results_examination_change', args=[exam.pk]))

        context = {
            **self.admin_site.each_context(request),
            'opts': self.model._meta,
            'title': f'Import grades: {exam}',
            'exam': exam,
            'form': form,
            'csv_template': CSV_TEMPLATE,
        }
        return TemplateResponse(request, 'admin/results/examination/import_grades.html', context)


@admin.register(Grade)
class GradeAdmin(admin.ModelAdmin):
    list_display = ['id', 'examination', 'student', 'marks_obtained', 'percentage', 'grade', 'gpa', 'date']
    list_filter = ['examination__name', 'grade']
    search_fields = ['student__name', 'student__roll_number']
    readonly_fields = ['percentage', 'grade', 'gpa']
