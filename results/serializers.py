from django.db.models import Max
from rest_framework import serializers
from schools.models import School
from academics.models import ClassRoom, Section, Subject, StudentProfile
from .models import Examination, Grade


class ExaminationSerializer(serializers.ModelSerializer):
    school_id = serializers.PrimaryKeyRelatedField(source='school', queryset=School.objects.all(), write_only=True)
    subject_id = serializers.PrimaryKeyRelatedField(source='subject', queryset=Subject.objects.all(), write_only=True)
    classroom_id = serializers.PrimaryKeyRelatedField(source='classroom', queryset=ClassRoom.objects.all(), write_only=True)
    section_id = serializers.PrimaryKeyRelatedField(source='section', queryset=Section.objects.all(), write_only=True, allow_null=True, required=False)
    subject_name = serializers.CharField(source='subject.name', read_only=True)
    classroom_name = serializers.CharField(source='classroom.name', read_only=True)
    section_name = serializers.CharField(source='section.name', read_only=True, default=None)

    class Meta:
        model = Examination
        fields = [
            'id', 'school', 'school_id', 'name', 'subject', 'subject_id', 'subject_name',
            'classroom', 'classroom_id', 'classroom_name', 'section', 'section_id', 'section_name',
            'date', 'total_marks', 'passing_marks', 'duration', 'status', 'semester',
        ]
        read_only_fields = ['school', 'subject', 'classroom', 'section']

    def validate(self, data):
        total = data.get('total_marks', getattr(self.instance, 'total_marks', 100))
        passing = data.get('passing_marks', getattr(self.instance, 'passing_marks', 33))
        if total <= 0:
            raise serializers.ValidationError({'total_marks': 'Total marks must be greater than zero.'})
        if passing > total:
            raise serializers.ValidationError({'passing_marks': 'Passing marks cannot exceed total marks.'})
        if self.instance is not None and 'total_marks' in data:
            highest = self.instance.grades.aggregate(highest=Max('marks_obtained'))['highest']
            if highest is not None and total < highest:
                raise serializers.ValidationError({
                    'total_marks': f'Total marks cannot be lower than the highest recorded mark ({highest}).'
                })
        return data


class GradeSerializer(serializers.ModelSerializer):
    student_id = serializers.PrimaryKeyRelatedField(source='student', queryset=StudentProfile.objects.all(), write_only=True)
    examination_id = serializers.PrimaryKeyRelatedField(source='examination', queryset=Examination.objects.all(), write_only=True)
    student_name = serializers.CharField(source='student.name', read_only=True)
    exam_name = serializers.CharField(source='examination.name', read_only=True)
    subject = serializers.CharField(source='examination.subject.name', read_only=True)
    total_marks = serializers.IntegerField(source='examination.total_marks', read_only=True)

    class Meta:
        model = Grade
        fields = [
            'id', 'student', 'student_id', 'student_name', 'examination', 'examination_id',
            'exam_name', 'subject', 'marks_obtained', 'total_marks', 'percentage', 'grade',
            'gpa', 'date', 'remarks',
        ]
        read_only_fields = ['student', 'examination', 'percentage', 'grade', 'gpa', 'date']

    def validate(self, data):
        examination = data.get('examination', getattr(self.instance, 'examination', None))
        student = data.get('student', getattr(self.instance, 'student', None))
        marks = data.get('marks_obtained', getattr(self.instance, 'marks_obtained', None))

        if marks is not None and examination is not None:
            if marks < 0 or marks > examination.total_marks:
                raise serializers.ValidationError({
                    'marks_obtained': f'Marks must be between 0 and {examination.total_marks}.'
                })
        if student is not None and examination is not None and student.classroom_id != examination.classroom_id:
            raise serializers.ValidationError({'student_id': 'Student does not belong to the examination class.'})
        return data


class SubjectCellSerializer(serializers.Serializer):
    marks = serializers.SerializerMethodField()
    grade = serializers.CharField()

    def get_marks(self, obj):
        if not obj.is_recorded:
            return obj.marks
        return float(obj.marks)


class StudentSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField(source='student.id')
    name = serializers.CharField(source='student.name')
    roll_number = serializers.CharField(source='student.roll_number')
    grades = serializers.SerializerMethodField()
    total_obtained = serializers.FloatField()
    total_max = serializers.IntegerField()
    percentage = serializers.FloatField()
    rank = serializers.IntegerField()
    result = serializers.CharField()

    def get_grades(self, obj):
        return {
            subject: SubjectCellSerializer(cell).data
            for subject, cell in obj.per_subject.items()
        }


class TabulationSheetSerializer(serializers.Serializer):
    subjects = serializers.ListField(child=serializers.CharField())
    students = StudentSummarySerializer(many=True)


class TranscriptLineSerializer(serializers.Serializer):
    subject = serializers.CharField()
    marks_obtained = serializers.FloatField()
    total_marks = serializers.IntegerField()
    grade = serializers.CharField()
    gpa = serializers.FloatField()
    percentage = serializers.FloatField()
    date = serializers.DateField(allow_null=True)


class ExamGroupSerializer(serializers.Serializer):
    exam_name = serializers.CharField()
    lines = TranscriptLineSerializer(many=True)
    total_obtained = serializers.FloatField()
    total_max = serializers.IntegerField()
    percentage = serializers.FloatField()


class TranscriptSerializer(serializers.Serializer):
    groups = ExamGroupSerializer(many=True)
    total_obtained = serializers.FloatField()
    total_max = serializers.IntegerField()
    percentage = serializers.FloatField()
    cgpa = serializers.FloatField()
    result = serializers.CharField()
    legend = serializers.ListField(child=serializers.CharField())
