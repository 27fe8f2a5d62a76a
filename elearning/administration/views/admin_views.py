"""
E-Learning Staff Views

Staff-only endpoints for student support, live sessions and the affiliate
program. All actions go through AdminActionService, which writes the audit log.

Author: DSP Development Team
Version: 1.0.0
"""

from django.contrib.auth.models import User
from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from ...affiliates.models import Affiliate, Payout
from ...affiliates.serializers import AffiliateSerializer, PayoutSerializer
from ...certificates.serializers import CertificateSerializer
from ...live.models import LiveQuestion, LiveSession
from ...live.serializers import LiveQuestionSerializer, LiveSessionSerializer
from ...modules.models import Course, Module
from ...modules.serializers import MilestoneAwardSerializer, ModuleProgressSerializer
from ...quizzes.models import Quiz
from ...services import AdminActionService, ProgressionService
from ..models import AdminNote, AuditLog
from ..serializers import (
    AdminNoteSerializer,
    AffiliateStatusSerializer,
    AuditLogSerializer,
    LiveQuestionStatusSerializer,
    LiveSessionCreateSerializer,
    LiveSessionReplaySerializer,
    PassingScoreSerializer,
    PayoutCreateSerializer,
)


class StaffAPIView(APIView):
    permission_classes = [permissions.IsAdminUser]

    def get_student(self, user_id):
        return get_object_or_404(User, pk=user_id)


# --- Student progress ---

class StudentCourseProgressAdminView(StaffAPIView):
    def get(self, request, user_id, course_id):
        student = self.get_student(user_id)
        course = get_object_or_404(Course, pk=course_id)
        return Response(ProgressionService().student_progress(student, course))


class UnlockModuleView(StaffAPIView):
    def post(self, request, user_id, module_id):
        student = self.get_student(user_id)
        module = get_object_or_404(Module, pk=module_id)
        progress = AdminActionService().unlock_module(request.user, student, module)
        return Response(ModuleProgressSerializer(progress).data)


class CompleteModuleView(StaffAPIView):
    def post(self, request, user_id, module_id):
        student = self.get_student(user_id)
        module = get_object_or_404(Module, pk=module_id)
        awards = AdminActionService().complete_module(request.user, student, module)
        return Response({"new_milestones": MilestoneAwardSerializer(awards, many=True).data})


class ResetQuizView(StaffAPIView):
    def post(self, request, user_id, quiz_id):
        student = self.get_student(user_id)
        quiz = get_object_or_404(Quiz, pk=quiz_id)
        deleted = AdminActionService().reset_quiz(request.user, student, quiz)
        return Response({"deleted_attempts": deleted})


class ResetProgressView(StaffAPIView):
    def post(self, request, user_id, course_id):
        student = self.get_student(user_id)
        course = get_object_or_404(Course, pk=course_id)
        counts = AdminActionService().reset_progress(request.user, student, course)
        return Response({"deleted": counts})


class GrantCertificateView(StaffAPIView):
    def post(self, request, user_id, course_id):
        student = self.get_student(user_id)
        course = get_object_or_404(Course, pk=course_id)
        certificate = AdminActionService().grant_certificate(request.user, student, course)
        return Response(CertificateSerializer(certificate).data, status=status.HTTP_201_CREATED)


class StudentNotesView(StaffAPIView):
    """Internal notes about a student, newest first."""

    def get(self, request, user_id):
        student = self.get_student(user_id)
        notes = AdminNote.objects.filter(student=student).select_related("author")
        return Response(AdminNoteSerializer(notes, many=True).data)

    def post(self, request, user_id):
        student = self.get_student(user_id)
        serializer = AdminNoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        note = AdminActionService().add_note(
            request.user, student, serializer.validated_data["content"]
        )
        return Response(AdminNoteSerializer(note).data, status=status.HTTP_201_CREATED)


class AdminNoteDeleteView(StaffAPIView):
    def delete(self, request, note_id):
        note = get_object_or_404(AdminNote, pk=note_id)
        AdminActionService().delete_note(request.user, note)
        return Response(status=status.HTTP_204_NO_CONTENT)


# --- Catalogue ---

class CoursePassingScoreView(StaffAPIView):
    def patch(self, request, course_id):
        course = get_object_or_404(Course, pk=course_id)
        serializer = PassingScoreSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        AdminActionService().update_passing_score(
            request.user, course, serializer.validated_data["passing_score"]
        )
        return Response({"id": course.pk, "passing_score": course.passing_score})


# --- Affiliates ---

class AffiliateStatusView(StaffAPIView):
    def post(self, request, affiliate_id):
        affiliate = get_object_or_404(Affiliate, pk=affiliate_id)
        serializer = AffiliateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        AdminActionService().update_affiliate_status(
            request.user,
            affiliate,
            serializer.validated_data["status"],
            commission_rate=serializer.validated_data.get("commission_rate"),
        )
        return Response(AffiliateSerializer(affiliate, context={"request": request}).data)


class PayoutCreateView(StaffAPIView):
    def post(self, request):
        serializer = PayoutCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        affiliate = get_object_or_404(Affiliate, pk=serializer.validated_data["affiliate_id"])
        payout = AdminActionService().create_payout(
            request.user, affiliate, serializer.validated_data["amount"]
        )
        return Response(PayoutSerializer(payout).data, status=status.HTTP_201_CREATED)


class PayoutMarkPaidView(StaffAPIView):
    def post(self, request, payout_id):
        payout = get_object_or_404(Payout, pk=payout_id)
        AdminActionService().mark_payout_paid(request.user, payout)
        return Response(PayoutSerializer(payout).data)


# --- Live sessions ---

class LiveSessionCreateView(StaffAPIView):
    def post(self, request):
        serializer = LiveSessionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = AdminActionService().create_live_session(request.user, **serializer.validated_data)
        return Response(LiveSessionSerializer(session).data, status=status.HTTP_201_CREATED)


class LiveSessionReplayView(StaffAPIView):
    def post(self, request, session_id):
        session = get_object_or_404(LiveSession, pk=session_id)
        serializer = LiveSessionReplaySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        AdminActionService().add_session_replay(
            request.user,
            session,
            serializer.validated_data["replay_url"],
            notes=serializer.validated_data.get("notes"),
        )
        return Response(LiveSessionSerializer(session).data)


class LiveQuestionStatusView(StaffAPIView):
    def patch(self, request, question_id):
        question = get_object_or_404(LiveQuestion.objects.select_related("student"), pk=question_id)
        serializer = LiveQuestionStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        AdminActionService().update_question_status(
            request.user, question, serializer.validated_data["status"]
        )
        return Response(LiveQuestionSerializer(question).data)


class AuditLogListView(generics.ListAPIView):
    queryset = AuditLog.objects.select_related("actor")
    serializer_class = AuditLogSerializer
    permission_classes = [permissions.IsAdminUser]
