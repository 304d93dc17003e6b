from django.urls import path
from .views import SchoolViewSet, dashboard_stats, school_context
from rest_framework.routers import DefaultRouter

router = DefaultRouter()
router.register(r'schools', SchoolViewSet)

urlpatterns = [
    path('schools/context/', school_context, name='school-context'),
    path('dashboard-stats/', dashboard_stats, name='dashboard-stats'),
]

urlpatterns += router.urls
