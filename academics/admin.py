from django.contrib import admin
from .models import ClassRoom, Section, Subject, StudentProfile, Teacher


@admin.register(ClassRoom)
class ClassRoomAdmin(admin.ModelAdmin):
    list_display = ['id', 'school', 'name']
    search_fields = ['name']


@admin.register(Section)
class SectionAdmin(admin.ModelAdmin):
    list_display = ['id', 'classroom', 'name']


@admin.register(Subject)
class SubjectAdmin(admin.ModelAdmin):
    list_display = ['id', 'school', 'name', 'code']
    search_fields = ['name', 'code']


@admin.register(StudentProfile)
class StudentProfileAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'school', 'classroom', 'section', 'roll_number', 'status']
    list_filter = ['school', 'classroom', 'status']
    search_fields = ['name', 'roll_number']


@admin.register(Teacher)
class TeacherAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'school', 'subject', 'salary', 'join_date']
    list_filter = ['school']
    search_fields = ['name', 'subject']
