from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ExpenseViewSet, IncomeViewSet, PayrollViewSet, FeeViewSet

router = DefaultRouter()
router.register('expenses', ExpenseViewSet)
router.register('incomes', IncomeViewSet)
router.register('payroll', PayrollViewSet)
router.register('fees', FeeViewSet)

urlpatterns = [path('', include(router.urls))]
