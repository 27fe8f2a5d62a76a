"""
Live Session Service für DSP E-Learning Platform

Student side of the live Q&A sessions. Staff actions (creating sessions,
moderating questions, publishing replays) live in AdminActionService so
they are audited.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from typing import Any, Dict, Tuple

from django.db import IntegrityError, transaction
from django.db.models import Case, Count, F, IntegerField, QuerySet, Value, When
from django.utils import timezone

from ...live.models import LiveQuestion, LiveQuestionUpvote, LiveRSVP, LiveSession

logger = logging.getLogger(__name__)

PAST_SESSIONS_LIMIT = 10

# Pinned questions first, answered ones last
STATUS_RANK = Case(
    When(status=LiveQuestion.Status.PINNED, then=Value(0)),
    When(status=LiveQuestion.Status.PENDING, then=Value(1)),
    default=Value(2),
    output_field=IntegerField(),
)


class LiveSessionService:
    """
    Service für Live-Sitzungen.
    """

    def __init__(self):
        self.logger = logger

    # --- Read ---

    def _with_counts(self, queryset: QuerySet) -> QuerySet:
        return queryset.annotate(
            rsvp_count=Count("rsvps", distinct=True),
            question_count=Count("questions", distinct=True),
        )

    def list_sessions(self) -> Dict[str, Any]:
        """
        Upcoming sessions (soonest first) and the most recent past sessions.

        Returns:
            Dictionary with ``upcoming`` and ``past`` querysets, each session
            annotated with ``rsvp_count`` and ``question_count``
        """
        now = timezone.now()
        upcoming = self._with_counts(
            LiveSession.objects.filter(scheduled_at__gte=now)
        ).order_by("scheduled_at")
        past = self._with_counts(
            LiveSession.objects.filter(scheduled_at__lt=now)
        ).order_by("-scheduled_at")[:PAST_SESSIONS_LIMIT]
        return {"upcoming": upcoming, "past": past}

    def ordered_questions(self, session: LiveSession) -> QuerySet:
        return (
            session.questions.select_related("student")
            .annotate(status_rank=STATUS_RANK)
            .order_by("status_rank", "-upvotes", "created_at", "id")
        )

    def session_details(self, student, session: LiveSession) -> Dict[str, Any]:
        """
        Session with its moderated question list and the student's RSVP state.
        """
        return {
            "session": session,
            "questions": self.ordered_questions(session),
            "rsvp_count": session.rsvps.count(),
            "has_rsvped": LiveRSVP.objects.filter(student=student, session=session).exists(),
        }

    # --- Write ---

    def rsvp(self, student, session: LiveSession) -> Tuple[LiveRSVP, bool]:
        """
        Register a student for a session. Repeating the call is a no-op.

        Returns:
            Tuple of (rsvp, created)
        """
        rsvp, created = LiveRSVP.objects.get_or_create(student=student, session=session)
        if created:
            self.logger.info("User %s registered for live session %s", student.pk, session.pk)
        return rsvp, created

    def submit_question(self, student, session: LiveSession, text: str) -> LiveQuestion:
        text = (text or "").strip()
        if not text:
            raise ValueError("Question cannot be empty")
        question = LiveQuestion.objects.create(session=session, student=student, text=text)
        self.logger.info("User %s asked question %s in session %s", student.pk, question.pk, session.pk)
        return question

    def upvote_question(self, student, question: LiveQuestion) -> Tuple[LiveQuestion, bool]:
        """
        Upvote a question once per student.

        Returns:
            Tuple of (question with current upvotes, counted); counted is
            False if the student had already upvoted
        """
        try:
            with transaction.atomic():
                LiveQuestionUpvote.objects.create(question=question, student=student)
                LiveQuestion.objects.filter(pk=question.pk).update(upvotes=F("upvotes") + 1)
        except IntegrityError:
            question.refresh_from_db(fields=["upvotes"])
            return question, False
        question.refresh_from_db(fields=["upvotes"])
        return question, True
