from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    ClassRoomViewSet, SectionViewSet, SubjectViewSet,
    StudentProfileViewSet, TeacherViewSet
)

router = DefaultRouter()
router.register('classrooms', ClassRoomViewSet)
router.register('sections', SectionViewSet)
router.register('subjects', SubjectViewSet)
router.register('students', StudentProfileViewSet)
router.register('teachers', TeacherViewSet)

urlpatterns = [
    path('', include(router.urls)),
]
