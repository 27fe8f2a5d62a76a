"""
Lesson Service für DSP E-Learning Platform

Owns every mutation of LessonProgress. Lessons are only reachable in
modules the student has unlocked; completing a lesson does not advance
the module, quizzes do that.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone

from ...exceptions import ModuleLocked
from ...lessons.models import Lesson, LessonProgress
from ...modules.models import ModuleProgress
from ...users.models import Profile

logger = logging.getLogger(__name__)

AUTO_COMPLETE_PERCENT = 90.0


class LessonService:
    """
    Service für den Lektionsfortschritt.
    """

    def __init__(self):
        self.logger = logger

    def _check_unlocked(self, student, lesson: Lesson) -> None:
        progress = ModuleProgress.objects.filter(
            student=student, module_id=lesson.module_id
        ).first()
        if progress is None or progress.is_locked:
            raise ModuleLocked(details={"lesson_id": lesson.pk, "module_id": lesson.module_id})

    def _locked_progress(self, student, lesson: Lesson) -> LessonProgress:
        progress, _ = LessonProgress.objects.select_for_update().get_or_create(
            student=student, lesson=lesson
        )
        return progress

    def lesson_for_student(self, student, lesson: Lesson) -> Optional[LessonProgress]:
        """
        Check lesson access and return the student's progress, if any.

        Raises:
            ModuleLocked: If the lesson's module is locked or not initialised
        """
        self._check_unlocked(student, lesson)
        return LessonProgress.objects.filter(student=student, lesson=lesson).first()

    def mark_lesson_complete(self, student, lesson: Lesson) -> LessonProgress:
        """
        Mark a lesson as fully watched and completed.

        Repeating the call keeps the first completion timestamp.

        Raises:
            ModuleLocked: If the lesson's module is locked or not initialised
        """
        self._check_unlocked(student, lesson)
        now = timezone.now()
        with transaction.atomic():
            progress = self._locked_progress(student, lesson)
            progress.watched_percent = 100.0
            if not progress.completed:
                progress.completed = True
                progress.completed_at = now
            progress.save()
            Profile.objects.filter(user=student).update(last_activity_at=now)

        self.logger.info("User %s completed lesson %s", student.pk, lesson.pk)
        return progress

    def update_video_progress(self, student, lesson: Lesson, watched_percent: float) -> LessonProgress:
        """
        Record video progress of a lesson.

        The stored percentage is the maximum ever reported, so seeking back
        does not lose progress. Reaching AUTO_COMPLETE_PERCENT completes the
        lesson; a completed lesson stays completed.

        Args:
            student: Watching user
            lesson: Lesson of the video
            watched_percent: Reported percentage, clamped to 0-100

        Raises:
            ModuleLocked: If the lesson's module is locked or not initialised
        """
        self._check_unlocked(student, lesson)
        watched_percent = min(max(float(watched_percent), 0.0), 100.0)
        now = timezone.now()
        with transaction.atomic():
            progress = self._locked_progress(student, lesson)
            progress.watched_percent = max(progress.watched_percent, watched_percent)
            if watched_percent >= AUTO_COMPLETE_PERCENT and not progress.completed:
                progress.completed = True
                progress.completed_at = now
                self.logger.info("User %s auto-completed lesson %s", student.pk, lesson.pk)
            progress.save()
            Profile.objects.filter(user=student).update(last_activity_at=now)
        return progress
