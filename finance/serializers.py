from rest_framework import serializers
from schools.models import School
from academics.models import StudentProfile, Teacher
from .models import Expense, Income, Payroll, Fee


class ExpenseSerializer(serializers.ModelSerializer):
    school_id = serializers.PrimaryKeyRelatedField(source='school', queryset=School.objects.all(), write_only=True)

    class Meta:
        model = Expense
        fields = ['id', 'school', 'school_id', 'title', 'category', 'amount', 'date', 'description', 'created_at']
        read_only_fields = ['school', 'created_at']

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Amount must be greater than zero.')
        return value


class IncomeSerializer(serializers.ModelSerializer):
    school_id = serializers.PrimaryKeyRelatedField(source='school', queryset=School.objects.all(), write_only=True)

    class Meta:
        model = Income
        fields = ['id', 'school', 'school_id', 'title', 'category', 'amount', 'date', 'description', 'created_at']
        read_only_fields = ['school', 'created_at']

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Amount must be greater than zero.')
        return value


class PayrollSerializer(serializers.ModelSerializer):
    school_id = serializers.PrimaryKeyRelatedField(source='school', queryset=School.objects.all(), write_only=True)
    teacher_id = serializers.PrimaryKeyRelatedField(source='teacher', queryset=Teacher.objects.all(), write_only=True)
    teacher_name = serializers.CharField(source='teacher.name', read_only=True)
    bonus = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    deductions = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)

    class Meta:
        model = Payroll
        fields = [
            'id', 'school', 'school_id', 'teacher', 'teacher_id', 'teacher_name',
            'month', 'year', 'base_salary', 'bonus', 'deductions', 'net_salary',
            'status', 'paid_date', 'created_at'
        ]
        read_only_fields = ['school', 'teacher', 'base_salary', 'net_salary', 'created_at']


class FeeSerializer(serializers.ModelSerializer):
    school_id = serializers.PrimaryKeyRelatedField(source='school', queryset=School.objects.all(), write_only=True)
    student_id = serializers.PrimaryKeyRelatedField(source='student', queryset=StudentProfile.objects.all(), write_only=True)
    student_name = serializers.CharField(source='student.name', read_only=True)

    class Meta:
        model = Fee
        fields = [
            'id', 'school', 'school_id', 'student', 'student_id', 'student_name',
            'amount', 'description', 'month', 'due_date', 'status',
            'payment_date', 'payment_method', 'receipt_number',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['school', 'student', 'receipt_number', 'created_at', 'updated_at']


class FeeCollectSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=Fee.PAYMENT_METHODS, default='cash')
    payment_date = serializers.DateField(required=False)
