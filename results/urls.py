from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ExaminationViewSet, GradeViewSet, TabulationViewSet, TranscriptView

router = DefaultRouter()
router.register('examinations', ExaminationViewSet)
router.register('grades', GradeViewSet)
router.register('tabulation', TabulationViewSet, basename='tabulation')

urlpatterns = [
    path('transcript/<int:student_id>/', TranscriptView.as_view(), name='student-transcript'),
    path('', include(router.urls)),
]
