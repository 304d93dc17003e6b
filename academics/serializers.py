from rest_framework import serializers
from schools.models import School
from .models import ClassRoom, Section, Subject, StudentProfile, Teacher


class ClassRoomSerializer(serializers.ModelSerializer):
    school_id = serializers.PrimaryKeyRelatedField(source='school', queryset=School.objects.all(), write_only=True)
    student_count = serializers.SerializerMethodField()
    sections = serializers.SerializerMethodField()

    def get_student_count(self, obj):
        return obj.students.filter(status=StudentProfile.STATUS_ACTIVE).count()

    def get_sections(self, obj):
        """Get sections for this classroom"""
        return [{'id': s.id, 'name': s.name} for s in obj.sections.all()]

    class Meta:
        model = ClassRoom
        fields = ['id', 'school', 'school_id', 'name', 'description', 'student_count', 'sections']
        read_only_fields = ['school']


class SectionSerializer(serializers.ModelSerializer):
    classroom_name = serializers.CharField(source='classroom.name', read_only=True)
    classroom_id = serializers.PrimaryKeyRelatedField(source='classroom', queryset=ClassRoom.objects.all(), write_only=True)

    class Meta:
        model = Section
        fields = ['id', 'classroom', 'classroom_id', 'classroom_name', 'name']
        read_only_fields = ['classroom']


class SubjectSerializer(serializers.ModelSerializer):
    school_id = serializers.PrimaryKeyRelatedField(source='school', queryset=School.objects.all(), write_only=True, required=True)

    class Meta:
        model = Subject
        fields = ['id', 'school', 'school_id', 'name', 'code']
        read_only_fields = ['school']


class StudentProfileSerializer(serializers.ModelSerializer):
    school_id = serializers.PrimaryKeyRelatedField(source='school', queryset=School.objects.all(), write_only=True)
    classroom_id = serializers.PrimaryKeyRelatedField(source='classroom', queryset=ClassRoom.objects.all(), write_only=True, allow_null=True, required=False)
    section_id = serializers.PrimaryKeyRelatedField(source='section', queryset=Section.objects.all(), write_only=True, allow_null=True, required=False)
    classroom_name = serializers.CharField(source='classroom.name', read_only=True, default=None)
    section_name = serializers.CharField(source='section.name', read_only=True, default=None)

    class Meta:
        model = StudentProfile
        fields = [
            'id', 'school', 'school_id', 'name', 'classroom', 'classroom_id', 'classroom_name',
            'section', 'section_id', 'section_name', 'roll_number', 'status',
            'date_of_birth', 'enrollment_date', 'guardian_name', 'guardian_phone',
        ]
        read_only_fields = ['school', 'classroom', 'section']

    def validate(self, data):
        classroom = data.get('classroom', getattr(self.instance, 'classroom', None))
        section = data.get('section', getattr(self.instance, 'section', None))
        if section and classroom and section.classroom_id != classroom.id:
            raise serializers.ValidationError({'section_id': 'Section does not belong to the selected class.'})
        return data


class TeacherSerializer(serializers.ModelSerializer):
    school_id = serializers.PrimaryKeyRelatedField(source='school', queryset=School.objects.all(), write_only=True)

    class Meta:
        model = Teacher
        fields = ['id', 'school', 'school_id', 'name', 'subject', 'salary', 'join_date', 'phone_number']
        read_only_fields = ['school']


class RosterEntrySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    roll_number = serializers.CharField(allow_blank=True)
