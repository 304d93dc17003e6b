from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from django.db.models import Sum
import logging

from .models import Expense, Income, Payroll, Fee
from .serializers import (
    ExpenseSerializer, IncomeSerializer, PayrollSerializer,
    FeeSerializer, FeeCollectSerializer
)

logger = logging.getLogger(__name__)


def _total(qs, field='amount'):
    return qs.aggregate(total=Sum(field))['total'] or 0


class ExpenseViewSet(viewsets.ModelViewSet):
    queryset = Expense.objects.select_related('school').all()
    serializer_class = ExpenseSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['school', 'category', 'date']
    search_fields = ['title', 'category']

    @action(detail=False, methods=['get'])
    def total(self, request):
        """Sum of the filtered expenses"""
        qs = self.filter_queryset(self.get_queryset())
        return Response({'count': qs.count(), 'total': _total(qs)})


class IncomeViewSet(viewsets.ModelViewSet):
    queryset = Income.objects.select_related('school').all()
    serializer_class = IncomeSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['school', 'category', 'date']
    search_fields = ['title', 'category']

    @action(detail=False, methods=['get'])
    def total(self, request):
        """Sum of the filtered incomes"""
        qs = self.filter_queryset(self.get_queryset())
        return Response({'count': qs.count(), 'total': _total(qs)})


class PayrollViewSet(viewsets.ModelViewSet):
    queryset = Payroll.objects.select_related('school', 'teacher').all()
    serializer_class = PayrollSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['school', 'teacher', 'month', 'year', 'status']
    search_fields = ['teacher__name']

    @action(detail=False, methods=['get'])
    def summary(self, request):
        """Net salary totals by status"""
        qs = self.filter_queryset(self.get_queryset())
        return Response({
            'total_paid': _total(qs.filter(status=Payroll.STATUS_PAID), 'net_salary'),
            'total_pending': _total(qs.filter(status=Payroll.STATUS_PENDING), 'net_salary'),
            'count': qs.count(),
        })


class FeeViewSet(viewsets.ModelViewSet):
    queryset = Fee.objects.select_related('school', 'student').all()
    serializer_class = FeeSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['school', 'student', 'status', 'month']
    search_fields = ['student__name', 'description', 'receipt_number']

    @action(detail=True, methods=['post'])
    def collect(self, request, pk=None):
        """Record payment of a fee and issue its receipt number"""
        fee = self.get_object()
        if fee.status == Fee.STATUS_PAID:
            return Response(
                {"detail": f"Fee already paid (receipt {fee.receipt_number})"},
                status=status.HTTP_400_BAD_REQUEST
            )

        serializer = FeeCollectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        fee.collect(
            payment_method=serializer.validated_data['payment_method'],
            payment_date=serializer.validated_data.get('payment_date'),
        )
        logger.info("Collected fee %s for student %s, receipt %s", fee.id, fee.student_id, fee.receipt_number)
        return Response(FeeSerializer(fee, context={'request': request}).data)

    @action(detail=False, methods=['get'])
    def summary(self, request):
        """Collected, outstanding and overdue amounts of the filtered fees"""
        qs = self.filter_queryset(self.get_queryset())
        return Response({
            'collected': _total(qs.filter(status=Fee.STATUS_PAID)),
            'outstanding': _total(qs.filter(status=Fee.STATUS_UNPAID)),
            'overdue': _total(qs.filter(status='overdue')),
        })
