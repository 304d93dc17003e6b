from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.response import Response
from django.http import HttpResponse
import csv

from .models import ClassRoom, Section, Subject, StudentProfile, Teacher
from .serializers import (
    ClassRoomSerializer, SectionSerializer, SubjectSerializer,
    StudentProfileSerializer, TeacherSerializer, RosterEntrySerializer
)


class ClassRoomViewSet(viewsets.ModelViewSet):
    queryset = ClassRoom.objects.select_related('school').prefetch_related('sections').all()
    serializer_class = ClassRoomSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['school']
    search_fields = ['name']

    @action(detail=True, methods=['get'])
    def roster(self, request, pk=None):
        """Active students of the class (optionally one section), ordered by name"""
        from results.sources import ORMTabulationSource

        classroom = self.get_object()
        section = request.query_params.get('section') or None
        if section is not None:
            try:
                section = int(section)
            except ValueError:
                return Response(
                    {"detail": "section must be a numeric id"},
                    status=status.HTTP_400_BAD_REQUEST
                )
        entries = ORMTabulationSource().get_roster(classroom.id, section)
        return Response(RosterEntrySerializer(entries, many=True).data)


class SectionViewSet(viewsets.ModelViewSet):
    queryset = Section.objects.select_related('classroom__school').all()
    serializer_class = SectionSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['classroom']


class SubjectViewSet(viewsets.ModelViewSet):
    queryset = Subject.objects.select_related('school').all()
    serializer_class = SubjectSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['school']
    search_fields = ['name', 'code']


class StudentProfileViewSet(viewsets.ModelViewSet):
    queryset = StudentProfile.objects.select_related('school', 'classroom', 'section').all()
    serializer_class = StudentProfileSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['school', 'classroom', 'section', 'status']
    search_fields = ['name', 'roll_number']

    @action(detail=False, methods=['get'])
    def export_csv(self, request):
        """Export students to CSV"""
        qs = self.filter_queryset(self.get_queryset())

        response = HttpResponse(content_type='text/csv; charset=utf-8')
        response['Content-Disposition'] = 'attachment; filename="students_export.csv"'

        response.write('\ufeff')  # BOM for Excel
        writer = csv.writer(response)
        writer.writerow(['Serial', 'Student Name', 'Class', 'Section', 'Roll Number', 'Status', 'Guardian Name', 'Guardian Phone'])

        for idx, sp in enumerate(qs, start=1):
            classroom = sp.classroom.name if sp.classroom else ''
            section = sp.section.name if sp.section else ''
            writer.writerow([
                idx, sp.name, classroom, section, sp.roll_number or '', sp.status,
                sp.guardian_name or '', sp.guardian_phone or ''
            ])

        return response


class TeacherViewSet(viewsets.ModelViewSet):
    queryset = Teacher.objects.select_related('school').all()
    serializer_class = TeacherSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['school']
    search_fields = ['name', 'subject']
