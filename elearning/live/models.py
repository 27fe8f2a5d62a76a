"""
E-Learning Live Session Models

Models:
- LiveSession: Scheduled live Q&A session
- LiveRSVP: Registration of a student for a session
- LiveQuestion: Question submitted for a session
- LiveQuestionUpvote: One upvote of a student on a question

Question moderation states:

    PENDING <-> PINNED -> ANSWERED

Author: DSP Development Team
Version: 1.0.0
"""

from django.db import models
from django.conf import settings
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class LiveSession(models.Model):
    """
    Scheduled live Q&A session.

    Attributes:
        scheduled_at: Start of the session
        duration_minutes: Planned length
        join_url: Meeting link shown to students
        replay_url: Recording, added by staff after the session
        notes: Summary published with the replay
    """

    title = models.CharField(max_length=200, verbose_name=_("Session Title"))
    description = models.TextField(blank=True, default="")
    scheduled_at = models.DateTimeField(db_index=True, verbose_name=_("Scheduled At"))
    duration_minutes = models.PositiveIntegerField(default=60)
    join_url = models.URLField()
    replay_url = models.URLField(blank=True, default="")
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Live Session")
        verbose_name_plural = _("Live Sessions")
        ordering = ["-scheduled_at"]
        db_table = "elearning_live_session"

    def __str__(self) -> str:
        return f"{self.title} ({self.scheduled_at:%Y-%m-%d %H:%M})"

    @property
    def is_upcoming(self) -> bool:
        return self.scheduled_at >= timezone.now()


class LiveRSVP(models.Model):
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="live_rsvps",
    )
    session = models.ForeignKey(
        LiveSession, on_delete=models.CASCADE, related_name="rsvps"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Live RSVP")
        verbose_name_plural = _("Live RSVPs")
        db_table = "elearning_live_rsvp"
        constraints = [
            models.UniqueConstraint(
                fields=["student", "session"], name="unique_rsvp_per_session"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.student} -> {self.session.title}"


class LiveQuestion(models.Model):
    """
    Question of a student for a live session.

    ``upvotes`` mirrors the number of LiveQuestionUpvote rows and is kept
    in the same transaction as the upvote insert.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        PINNED = "pinned", _("Pinned")
        ANSWERED = "answered", _("Answered")

    session = models.ForeignKey(
        LiveSession, on_delete=models.CASCADE, related_name="questions"
    )
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="live_questions",
    )
    text = models.TextField(verbose_name=_("Question"))
    status = models.CharField(
        max_length=10, choices=Status.choices, default=Status.PENDING
    )
    upvotes = models.PositiveIntegerField(default=0)
    answered_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Live Question")
        verbose_name_plural = _("Live Questions")
        ordering = ["created_at"]
        db_table = "elearning_live_question"

    def __str__(self) -> str:
        return self.text[:60]


class LiveQuestionUpvote(models.Model):
    question = models.ForeignKey(
        LiveQuestion, on_delete=models.CASCADE, related_name="upvote_records"
    )
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="live_question_upvotes",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Question Upvote")
        verbose_name_plural = _("Question Upvotes")
        db_table = "elearning_live_question_upvote"
        constraints = [
            models.UniqueConstraint(
                fields=["question", "student"], name="unique_upvote_per_student"
            ),
        ]
