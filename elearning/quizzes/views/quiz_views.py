import logging

from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from ...services import ProgressionService
from ..models import Quiz
from ..serializers import QuizSerializer, QuizSubmissionSerializer, QuizResultSerializer

logger = logging.getLogger(__name__)


class QuizDetailView(APIView):
    """
    Quiz of an unlocked module. Correct answers are revealed once the
    student passed the quiz.
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        quiz = get_object_or_404(Quiz.objects.select_related("module__course"), pk=pk)
        has_passed = ProgressionService().quiz_for_student(request.user, quiz)
        serializer = QuizSerializer(quiz, context={"reveal_answers": has_passed})
        return Response(serializer.data)


class SubmitQuizView(APIView):
    """
    Submit answers for a quiz.

    Request Body Example (JSON):
        {
            "answers": [
                {"question_id": 1, "selected_option_id": "b"},
                {"question_id": 2, "selected_option_id": "a"}
            ]
        }
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        quiz = get_object_or_404(Quiz.objects.select_related("module__course"), pk=pk)
        serializer = QuizSubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ProgressionService().submit_quiz(
            request.user, quiz, serializer.validated_data["answers"]
        )
        return Response(QuizResultSerializer(result).data, status=status.HTTP_201_CREATED)
