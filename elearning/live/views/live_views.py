from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from ...services import LiveSessionService
from ..models import LiveQuestion, LiveSession
from ..serializers import LiveQuestionSerializer, LiveSessionSerializer, QuestionSubmitSerializer


class LiveSessionListView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        sessions = LiveSessionService().list_sessions()
        return Response(
            {
                "upcoming": LiveSessionSerializer(sessions["upcoming"], many=True).data,
                "past": LiveSessionSerializer(sessions["past"], many=True).data,
            }
        )


class LiveSessionDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        session = get_object_or_404(LiveSession, pk=pk)
        details = LiveSessionService().session_details(request.user, session)
        data = LiveSessionSerializer(session).data
        data.update(
            {
                "rsvp_count": details["rsvp_count"],
                "has_rsvped": details["has_rsvped"],
                "questions": LiveQuestionSerializer(details["questions"], many=True).data,
            }
        )
        return Response(data)


class LiveSessionRSVPView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        session = get_object_or_404(LiveSession, pk=pk)
        _, created = LiveSessionService().rsvp(request.user, session)
        return Response(
            {"session_id": session.pk, "has_rsvped": True},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class LiveQuestionCreateView(APIView):
    """
    Ask a question for a live session.

    Request Body Example (JSON):
        {"text": "How do decorators work?"}
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        session = get_object_or_404(LiveSession, pk=pk)
        serializer = QuestionSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        question = LiveSessionService().submit_question(
            request.user, session, serializer.validated_data["text"]
        )
        return Response(LiveQuestionSerializer(question).data, status=status.HTTP_201_CREATED)


class LiveQuestionUpvoteView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        question = get_object_or_404(LiveQuestion, pk=pk)
        question, counted = LiveSessionService().upvote_question(request.user, question)
        return Response({"id": question.pk, "upvotes": question.upvotes, "counted": counted})
