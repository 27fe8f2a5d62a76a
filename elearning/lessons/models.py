"""
E-Learning Lesson Models

Models:
- Lesson: Ordered content unit inside a module
- LessonProgress: Per-student completion and video progress of a lesson

Lesson progress is informational: module unlocking is driven by quizzes
only, a completed lesson never unlocks anything.

Author: DSP Development Team
Version: 1.0.0
"""

from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils.translation import gettext_lazy as _

from ..modules.models import Module


class Lesson(models.Model):
    """
    Content unit of a module.

    Attributes:
        module: Owning module
        title: Lesson title
        content: Text body of the lesson
        video_url: Optional video of the lesson
        order: Position within the module
        duration_seconds: Length of the video, 0 if unknown
    """

    module = models.ForeignKey(
        Module,
        on_delete=models.CASCADE,
        related_name="lessons",
        verbose_name=_("Module"),
    )
    title = models.CharField(max_length=200, verbose_name=_("Lesson Title"))
    content = models.TextField(blank=True, default="")
    video_url = models.URLField(blank=True, default="")
    order = models.PositiveIntegerField(
        verbose_name=_("Order"),
        help_text=_("Position of the lesson within the module"),
    )
    duration_seconds = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = _("Lesson")
        verbose_name_plural = _("Lessons")
        ordering = ["module", "order"]
        db_table = "elearning_lesson"
        constraints = [
            models.UniqueConstraint(
                fields=["module", "order"], name="unique_lesson_order_per_module"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.module.title} - {self.title}"


class LessonProgress(models.Model):
    """
    Progress of one student in one lesson.

    ``watched_percent`` only ever grows; ``completed_at`` is set once.
    """

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="lesson_progress",
        verbose_name=_("Student"),
    )
    lesson = models.ForeignKey(
        Lesson,
        on_delete=models.CASCADE,
        related_name="progress",
        verbose_name=_("Lesson"),
    )
    completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)
    watched_percent = models.FloatField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        verbose_name=_("Watched Percent"),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Lesson Progress")
        verbose_name_plural = _("Lesson Progress")
        db_table = "elearning_lesson_progress"
        constraints = [
            models.UniqueConstraint(
                fields=["student", "lesson"], name="unique_progress_per_lesson"
            ),
        ]

    def __str__(self) -> str:
        state = "done" if self.completed else f"{self.watched_percent:.0f}%"
        return f"{self.student} - {self.lesson.title}: {state}"
