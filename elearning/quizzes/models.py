from decimal import Decimal

from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils.translation import gettext_lazy as _

from ..modules.models import Module

User = settings.AUTH_USER_MODEL


class Quiz(models.Model):
    module = models.OneToOneField(
        Module, on_delete=models.CASCADE, related_name="quiz"
    )
    title = models.CharField(max_length=255)
    passing_score = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(100)],
        help_text=_("Überschreibt die Bestehensgrenze des Kurses (in Prozent)."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Quiz")
        verbose_name_plural = _("Quizzes")
        db_table = "elearning_quiz"

    def __str__(self):
        return self.title

    @property
    def resolved_passing_score(self) -> int:
        if self.passing_score is not None:
            return self.passing_score
        return self.module.course.passing_score


class Question(models.Model):
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name="questions")
    prompt = models.TextField()
    options = models.JSONField(
        default=list,
        help_text=_('Antwortmöglichkeiten als Liste von {"id": ..., "label": ...}.'),
    )
    correct_option_id = models.CharField(max_length=64)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = _("Question")
        verbose_name_plural = _("Questions")
        ordering = ["order", "id"]
        db_table = "elearning_question"

    def __str__(self):
        return self.prompt[:60]


class QuizAttempt(models.Model):
    """
    Append-only record of one quiz submission.

    ``attempt_number`` counts 1, 2, 3, ... per (student, quiz); the unique
    constraint turns a concurrent double submit into an IntegrityError
    instead of a repeated number.
    """

    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="quiz_attempts")
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name="attempts")
    score = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        help_text=_("Ergebnis in Prozent, auf zwei Nachkommastellen gerundet."),
    )
    passed = models.BooleanField(default=False)
    attempt_number = models.PositiveIntegerField()
    answers = models.JSONField(
        default=list,
        help_text=_('Liste von {"question_id", "selected_option_id", "correct"}.'),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Quiz Attempt")
        verbose_name_plural = _("Quiz Attempts")
        ordering = ["quiz", "attempt_number"]
        db_table = "elearning_quiz_attempt"
        constraints = [
            models.UniqueConstraint(
                fields=["student", "quiz", "attempt_number"],
                name="unique_attempt_number",
            ),
        ]

    def __str__(self):
        return f"{self.student} - {self.quiz} #{self.attempt_number}"
