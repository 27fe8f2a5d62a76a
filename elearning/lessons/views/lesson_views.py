from django.shortcuts import get_object_or_404
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from ...services import LessonService
from ..models import Lesson
from ..serializers import LessonProgressSerializer, LessonSerializer, VideoProgressSerializer


class LessonDetailView(APIView):
    """Lesson of an unlocked module together with the student's progress."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        lesson = get_object_or_404(Lesson.objects.select_related("module"), pk=pk)
        progress = LessonService().lesson_for_student(request.user, lesson)
        data = LessonSerializer(lesson).data
        data["progress"] = LessonProgressSerializer(progress).data if progress else None
        return Response(data)


class MarkLessonCompleteView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        lesson = get_object_or_404(Lesson.objects.select_related("module"), pk=pk)
        progress = LessonService().mark_lesson_complete(request.user, lesson)
        return Response(LessonProgressSerializer(progress).data)


class VideoProgressView(APIView):
    """
    Report how much of the lesson video the student has watched.

    Request Body Example (JSON):
        {"watched_percent": 42.5}
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        lesson = get_object_or_404(Lesson.objects.select_related("module"), pk=pk)
        serializer = VideoProgressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        progress = LessonService().update_video_progress(
            request.user, lesson, serializer.validated_data["watched_percent"]
        )
        return Response(LessonProgressSerializer(progress).data)
