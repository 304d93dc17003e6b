from decimal import Decimal
from django.db import models
from django.utils import timezone
from academics.models import StudentProfile, Teacher
from schools.models import School


class Expense(models.Model):
    CATEGORY_CHOICES = [
        ('salaries', 'Salaries'),
        ('utilities', 'Utilities'),
        ('maintenance', 'Maintenance'),
        ('supplies', 'Supplies'),
        ('technology', 'Technology'),
        ('other', 'Other'),
    ]

    school = models.ForeignKey(School, on_delete=models.CASCADE, related_name='expenses')
    title = models.CharField(max_length=200)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='other')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    date = models.DateField(default=timezone.localdate)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True, null=True)

    class Meta:
        ordering = ['-date', '-id']
        indexes = [
            models.Index(fields=['school', 'date']),
            models.Index(fields=['category']),
        ]

    def __str__(self):
        return f"{self.title} - {self.amount}"


class Income(models.Model):
    CATEGORY_CHOICES = [
        ('donations', 'Donations'),
        ('grants', 'Grants'),
        ('rentals', 'Rentals'),
        ('fundraising', 'Fundraising'),
        ('other', 'Other'),
    ]

    school = models.ForeignKey(School, on_delete=models.CASCADE, related_name='incomes')
    title = models.CharField(max_length=200)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='other')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    date = models.DateField(default=timezone.localdate)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True, null=True)

    class Meta:
        ordering = ['-date', '-id']
        indexes = [
            models.Index(fields=['school', 'date']),
            models.Index(fields=['category']),
        ]

    def __str__(self):
        return f"{self.title} - {self.amount}"


class Payroll(models.Model):
    """Monthly salary record for a teacher"""
    STATUS_PAID = 'paid'
    STATUS_PENDING = 'pending'
    STATUS_CHOICES = [
        (STATUS_PAID, 'Paid'),
        (STATUS_PENDING, 'Pending'),
        ('processing', 'Processing'),
    ]

    school = models.ForeignKey(School, on_delete=models.CASCADE, related_name='payrolls')
    teacher = models.ForeignKey(Teacher, on_delete=models.CASCADE, related_name='payrolls')
    month = models.CharField(max_length=20)  # e.g., January
    year = models.PositiveIntegerField()

    base_salary = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    bonus = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    deductions = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    net_salary = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    paid_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, null=True)

    class Meta:
        unique_together = ('teacher', 'month', 'year')
        ordering = ['-year', '-id']
        indexes = [
            models.Index(fields=['school', 'status']),
        ]

    def save(self, *args, **kwargs):
        # Base salary always follows the teacher's current salary
        self.base_salary = self.teacher.salary or Decimal('0.00')
        self.net_salary = self.base_salary + Decimal(str(self.bonus or 0)) - Decimal(str(self.deductions or 0))
        if self.status == self.STATUS_PAID and not self.paid_date:
            self.paid_date = timezone.localdate()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.teacher.name} - {self.month} {self.year} - {self.net_salary}"


class Fee(models.Model):
    """Fee charged to a student; a receipt number is issued when it is paid"""
    STATUS_PAID = 'paid'
    STATUS_UNPAID = 'unpaid'
    STATUS_CHOICES = [
        (STATUS_PAID, 'Paid'),
        (STATUS_UNPAID, 'Unpaid'),
        ('overdue', 'Overdue'),
    ]

    PAYMENT_METHODS = [
        ('cash', 'Cash'),
        ('bank_transfer', 'Bank Transfer'),
        ('cheque', 'Cheque'),
        ('online', 'Online Payment'),
        ('mobile_banking', 'Mobile Banking'),
        ('card', 'Credit/Debit Card'),
    ]

    school = models.ForeignKey(School, on_delete=models.CASCADE, related_name='fees')
    student = models.ForeignKey(StudentProfile, on_delete=models.CASCADE, related_name='fees')
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    description = models.CharField(max_length=255, blank=True)
    month = models.CharField(max_length=20, blank=True)
    due_date = models.DateField()

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_UNPAID)
    payment_date = models.DateField(null=True, blank=True)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHODS, blank=True)
    receipt_number = models.CharField(max_length=50, unique=True, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True, null=True)
    updated_at = models.DateTimeField(auto_now=True, null=True)

    class Meta:
        ordering = ['-due_date', '-id']
        indexes = [
            models.Index(fields=['student', 'due_date']),
            models.Index(fields=['payment_date']),
            models.Index(fields=['receipt_number']),
            models.Index(fields=['status']),
        ]

    def save(self, *args, **kwargs):
        if self.status == self.STATUS_PAID:
            if not self.payment_date:
                self.payment_date = timezone.localdate()
            if not self.receipt_number:
                self.receipt_number = self.next_receipt_number(self.payment_date)
        super().save(*args, **kwargs)

    @classmethod
    def next_receipt_number(cls, day):
        prefix = f"RCP-{day.strftime('%Y%m%d')}-"
        count = cls.objects.filter(receipt_number__startswith=prefix).count() + 1
        return f"{prefix}{count:04d}"

    def collect(self, payment_method='cash', payment_date=None):
        self.status = self.STATUS_PAID
        self.payment_method = payment_method or 'cash'
        self.payment_date = payment_date or timezone.localdate()
        self.save()

    def __str__(self):
        return f"{self.student.name} - {self.amount} - {self.status}"
