from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend
from django.db import transaction
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
import csv
import logging

from academics.models import StudentProfile
from schools.context import resolve_school_context
from .exceptions import TabulationError
from .models import Examination, Grade
from .serializers import (
    ExaminationSerializer, GradeSerializer, TabulationSheetSerializer, TranscriptSerializer
)
from .sources import ORMTabulationSource
from .stats import grades_summary, results_summary
from .tabulation import generate_tabulation
from .transcript import build_transcript, line_from_grade

logger = logging.getLogger(__name__)


class ExaminationViewSet(viewsets.ModelViewSet):
    queryset = Examination.objects.select_related('school', 'subject', 'classroom', 'section').all()
    serializer_class = ExaminationSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['school', 'classroom', 'section', 'subject', 'name', 'status']
    search_fields = ['name', 'subject__name']

    @action(detail=False, methods=['get'])
    def names(self, request):
        """Distinct exam names, optionally for one class"""
        qs = self.filter_queryset(self.get_queryset())
        names = sorted(set(qs.values_list('name', flat=True)))
        return Response(names)

    @action(detail=True, methods=['post'])
    def bulk_grades(self, request, pk=None):
        """Create or update grades in bulk for an examination"""
        examination = self.get_object()
        grades_data = request.data.get('grades', [])

        if not grades_data:
            return Response(
                {"detail": "No grades data provided"},
                status=status.HTTP_400_BAD_REQUEST
            )

        created = 0
        updated = 0
        errors = []

        with transaction.atomic():
            for idx, item in enumerate(grades_data):
                student_id = item.get('student_id')
                marks = item.get('marks_obtained')

                if not student_id or marks in (None, ''):
                    errors.append({'index': idx, 'error': 'student_id and marks_obtained are required'})
                    continue

                try:
                    student = StudentProfile.objects.get(id=student_id)
                except (StudentProfile.DoesNotExist, ValueError):
                    errors.append({'index': idx, 'error': f'Student with id {student_id} not found'})
                    continue

                if student.classroom_id != examination.classroom_id:
                    errors.append({
                        'index': idx,
                        'error': f'Student does not belong to class {examination.classroom.name}'
                    })
                    continue

                try:
                    marks = float(marks)
                except (TypeError, ValueError):
                    errors.append({'index': idx, 'error': f'Invalid marks value {marks!r}'})
                    continue
                if marks < 0 or marks > examination.total_marks:
                    errors.append({'index': idx, 'error': f'Marks must be between 0 and {examination.total_marks}'})
                    continue

                _, is_created = Grade.objects.update_or_create(
                    examination=examination,
                    student=student,
                    defaults={
                        'marks_obtained': marks,
                        'remarks': item.get('remarks', ''),
                    }
                )
                if is_created:
                    created += 1
                else:
                    updated += 1

        logger.info("Bulk grades for examination %s: %d created, %d updated, %d errors",
                    examination.id, created, updated, len(errors))
        return Response({
            'message': 'Bulk grade entry completed',
            'created': created,
            'updated': updated,
            'errors': errors
        })


class GradeViewSet(viewsets.ModelViewSet):
    queryset = Grade.objects.select_related('examination__subject', 'student').all()
    serializer_class = GradeSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['examination', 'student', 'grade', 'examination__name', 'examination__classroom']
    search_fields = ['student__name', 'examination__name', 'examination__subject__name']

    @action(detail=False, methods=['get'])
    def summary(self, request):
        """Average GPA, pass rate and excellence rate of the filtered grades"""
        qs = self.filter_queryset(self.get_queryset())
        return Response(grades_summary(qs))

    @action(detail=False, methods=['get'])
    def results_summary(self, request):
        """Pass rate, top student, exams published and average GPA"""
        qs = self.filter_queryset(self.get_queryset())
        return Response(results_summary(qs))

    @action(detail=False, methods=['get'])
    def export_csv(self, request):
        """Export grades to CSV"""
        qs = self.filter_queryset(self.get_queryset())

        response = HttpResponse(content_type='text/csv; charset=utf-8')
        response['Content-Disposition'] = 'attachment; filename="grades_export.csv"'

        response.write('\ufeff')  # BOM for Excel
        writer = csv.writer(response)
        writer.writerow(['Serial', 'Roll Number', 'Student Name', 'Exam', 'Subject', 'Marks', 'Total', 'Percentage', 'Grade', 'GPA'])

        for idx, grade in enumerate(qs, start=1):
            writer.writerow([
                idx,
                grade.student.roll_number or '',
                grade.student.name,
                grade.examination.name,
                grade.examination.subject.name,
                grade.marks_obtained,
                grade.examination.total_marks,
                grade.percentage,
                grade.grade,
                grade.gpa,
            ])

        return response


class TabulationViewSet(viewsets.ViewSet):
    """Ranked per-student marks sheet for one class and exam name"""

    def _parse_params(self, request):
        classroom = request.query_params.get('classroom')
        exam_name = (request.query_params.get('exam_name') or '').strip()
        section = request.query_params.get('section') or None
        if not classroom or not exam_name:
            return None, Response(
                {"detail": "classroom and exam_name parameters are required"},
                status=status.HTTP_400_BAD_REQUEST
            )
        try:
            classroom = int(classroom)
            section = int(section) if section else None
        except ValueError:
            return None, Response(
                {"detail": "classroom and section must be numeric ids"},
                status=status.HTTP_400_BAD_REQUEST
            )
        if classroom < 1 or (section is not None and section < 1):
            return None, Response(
                {"detail": "classroom and section must be positive ids"},
                status=status.HTTP_400_BAD_REQUEST
            )
        return (classroom, exam_name, section), None

    def _generate(self, params):
        classroom, exam_name, section = params
        return generate_tabulation(ORMTabulationSource(), classroom, exam_name, section=section)

    def list(self, request):
        params, error = self._parse_params(request)
        if error:
            return error

        try:
            sheet = self._generate(params)
        except TabulationError as exc:
            return Response({"detail": exc.detail}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        classroom, exam_name, section = params
        data = TabulationSheetSerializer(sheet).data
        data.update({
            'header': resolve_school_context(request).as_dict(),
            'classroom': classroom,
            'section': section,
            'exam_name': exam_name,
            'is_empty': sheet.is_empty,
        })
        return Response(data)

    @action(detail=False, methods=['get'])
    def export_csv(self, request):
        """Export the tabulation sheet to CSV"""
        params, error = self._parse_params(request)
        if error:
            return error

        try:
            sheet = self._generate(params)
        except TabulationError as exc:
            return Response({"detail": exc.detail}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        response = HttpResponse(content_type='text/csv; charset=utf-8')
        response['Content-Disposition'] = 'attachment; filename="tabulation_sheet.csv"'

        response.write('\ufeff')  # BOM for Excel
        writer = csv.writer(response)
        writer.writerow(['Rank', 'Roll No', 'Student Name'] + sheet.subjects + ['Total', '%', 'Result'])
        for summary in sheet.students:
            writer.writerow(
                [summary.rank, summary.student.roll_number, summary.student.name]
                + [summary.per_subject[subject].marks for subject in sheet.subjects]
                + [summary.total_obtained, summary.percentage, summary.result]
            )

        return response


class TranscriptView(APIView):
    """Cumulative transcript of every grade recorded for a student"""

    def get(self, request, student_id):
        student = get_object_or_404(
            StudentProfile.objects.select_related('classroom', 'section'), pk=student_id
        )
        grades = (
            Grade.objects.filter(student=student)
            .select_related('examination__subject')
            .order_by('date', 'id')
        )
        transcript = build_transcript(line_from_grade(g) for g in grades)

        data = TranscriptSerializer(transcript).data
        data.update({
            'header': resolve_school_context(request).as_dict(),
            'student': {
                'id': student.id,
                'name': student.name,
                'roll_number': student.roll_number,
                'classroom': student.classroom.name if student.classroom else None,
                'section': student.section.name if student.section else None,
                'date_of_birth': student.date_of_birth,
            },
        })
        return Response(data)
