from django.contrib import admin
from .models import Expense, Income, Payroll, Fee


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'school', 'category', 'amount', 'date']
    list_filter = ['school', 'category', 'date']
    search_fields = ['title', 'description']
    date_hierarchy = 'date'


@admin.register(Income)
class IncomeAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'school', 'category', 'amount', 'date']
    list_filter = ['school', 'category', 'date']
    search_fields = ['title', 'description']
    date_hierarchy = 'date'


@admin.register(Payroll)
class PayrollAdmin(admin.ModelAdmin):
    list_display = ['id', 'teacher', 'month', 'year', 'base_salary', 'bonus', 'deductions', 'net_salary', 'status', 'paid_date']
    list_filter = ['school', 'status', 'year']
    search_fields = ['teacher__name']
    readonly_fields = ['base_salary', 'net_salary']


@admin.register(Fee)
class FeeAdmin(admin.ModelAdmin):
    list_display = ['id', 'student', 'amount', 'month', 'due_date', 'status', 'payment_date', 'receipt_number']
    list_filter = ['school', 'status', 'month']
    search_fields = ['student__name', 'receipt_number']
    readonly_fields = ['receipt_number']
