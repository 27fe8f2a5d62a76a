from rest_framework import generics, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from django.shortcuts import get_object_or_404

from ...certificates.models import Certificate
from ...services import ProgressionService
from ..models import Course, Enrollment, MilestoneAward
from ..serializers import (
    CourseListSerializer,
    CourseDetailSerializer,
    StudentProgressSerializer,
)

# --- Public Views (ohne User-Kontext) ---

class CourseListViewPublic(generics.ListAPIView):
    queryset = Course.objects.filter(is_published=True)
    serializer_class = CourseListSerializer
    permission_classes = [permissions.AllowAny]

class CourseDetailViewPublic(generics.RetrieveAPIView):
    queryset = Course.objects.filter(is_published=True)
    serializer_class = CourseDetailSerializer
    permission_classes = [permissions.AllowAny]

# --- User-Specific Views (mit User-Kontext) ---

class StudentProgressView(APIView):
    """
    Progress overview of the authenticated student in a course.

    Only enrolled students see their progress; everyone else gets 403.
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        course = get_object_or_404(Course, pk=pk)
        if not Enrollment.objects.filter(student=request.user, course=course).exists():
            self.permission_denied(request, message="You are not enrolled in this course.")

        data = ProgressionService().student_progress(request.user, course)
        data["milestones"] = MilestoneAward.objects.filter(
            student=request.user, milestone__course=course
        ).select_related("milestone")
        certificate = Certificate.objects.filter(student=request.user, course=course).first()
        data["certificate_code"] = certificate.certificate_code if certificate else None
        return Response(StudentProgressSerializer(data).data)
