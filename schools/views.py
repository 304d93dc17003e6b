from datetime import timedelta

from django.db.models import Count, Sum
from django.utils import timezone
from rest_framework import viewsets
from rest_framework.decorators import api_view
from rest_framework.response import Response

from academics.models import ClassRoom, StudentProfile, Subject, Teacher
from finance.models import Expense, Fee, Income
from .context import resolve_school_context
from .models import School
from .serializers import SchoolSerializer

FEE_TREND_DAYS = 30


class SchoolViewSet(viewsets.ModelViewSet):
    queryset = School.objects.all()
    serializer_class = SchoolSerializer


@api_view(['GET'])
def school_context(request):
    """School name, academic session and signed-in profile for page headers"""
    return Response(resolve_school_context(request).as_dict())


def _amount_total(qs):
    return qs.aggregate(total=Sum('amount'))['total'] or 0


@api_view(['GET'])
def dashboard_stats(request):
    """
    Headline counts, money totals, recent fee collections and class sizes
    for one school (``?school_id=``)
    """
    raw_id = request.query_params.get('school_id')
    if not raw_id:
        return Response({"detail": "No school specified"}, status=400)
    try:
        school = School.objects.get(pk=int(raw_id))
    except ValueError:
        return Response({"detail": "Invalid school_id"}, status=400)
    except School.DoesNotExist:
        return Response({"detail": "School not found"}, status=404)

    active_students = StudentProfile.objects.filter(school=school, status=StudentProfile.STATUS_ACTIVE)
    total_income = _amount_total(Income.objects.filter(school=school))
    total_expenses = _amount_total(Expense.objects.filter(school=school))

    since = timezone.localdate() - timedelta(days=FEE_TREND_DAYS)
    fee_trend = (
        Fee.objects.filter(school=school, status=Fee.STATUS_PAID, payment_date__gte=since)
        .values('payment_date')
        .annotate(amount=Sum('amount'))
        .order_by('payment_date')
    )
    class_sizes = (
        active_students.values('classroom__name')
        .annotate(count=Count('id'))
        .order_by('classroom__name')
    )

    return Response({
        'school_id': school.id,
        'school_name': school.name,
        'students_count': active_students.count(),
        'teachers_count': Teacher.objects.filter(school=school).count(),
        'classes_count': ClassRoom.objects.filter(school=school).count(),
        'subjects_count': Subject.objects.filter(school=school).count(),
        'total_income': total_income,
        'total_expenses': total_expenses,
        'net_balance': total_income - total_expenses,
        'fee_data': list(fee_trend),
        'class_distribution': list(class_sizes),
    })
