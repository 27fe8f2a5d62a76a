"""
Admin Action Service für DSP E-Learning Platform

Staff operations on student data and the affiliate program. Every action
writes an AuditLog row in the same transaction as its changes.

Operations:
- unlock_module / complete_module for a student
- reset_quiz (deletes the attempts of one quiz)
- reset_progress (wipes and re-initialises a student's course progress)
- grant_certificate (override path without eligibility check)
- update_passing_score of a course
- update_affiliate_status, create_payout, mark_payout_paid
- add_note / delete_note (internal notes about a student)
- create_live_session, update_question_status, add_session_replay

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from decimal import Decimal
from datetime import datetime
from typing import Dict, List, Optional

from django.db import transaction
from django.utils import timezone

from ...administration.models import AdminNote, AuditLog
from ...affiliates.models import Affiliate, Payout
from ...certificates.models import Certificate
from ...lessons.models import LessonProgress
from ...live.models import LiveQuestion, LiveSession
from ...modules.models import Course, MilestoneAward, Module, ModuleProgress
from ...quizzes.models import Quiz, QuizAttempt
from ..certificates import CertificateService
from ..progression import ProgressionService

logger = logging.getLogger(__name__)


class AdminActionService:
    """
    Service für Admin-Aktionen.
    """

    def __init__(self, progression: Optional[ProgressionService] = None, certificates: Optional[CertificateService] = None):
        self.logger = logger
        self.progression = progression or ProgressionService()
        self.certificates = certificates or CertificateService()

    # --- Student progress ---

    def unlock_module(self, actor, student, module: Module) -> ModuleProgress:
        with transaction.atomic():
            progress, created = ModuleProgress.objects.select_for_update().get_or_create(
                student=student,
                module=module,
                defaults={"status": ModuleProgress.Status.UNLOCKED},
            )
            if not created and progress.status == ModuleProgress.Status.LOCKED:
                progress.status = ModuleProgress.Status.UNLOCKED
                progress.save(update_fields=["status", "updated_at"])
            AuditLog.record(actor, "unlock_module", "user", student.pk, module_id=module.pk)
        self.logger.info("Staff %s unlocked module %s for user %s", actor.pk, module.pk, student.pk)
        return progress

    def complete_module(self, actor, student, module: Module) -> List[MilestoneAward]:
        with transaction.atomic():
            awards = self.progression.advance_module(student, module)
            AuditLog.record(actor, "complete_module", "user", student.pk, module_id=module.pk)
        self.logger.info("Staff %s completed module %s for user %s", actor.pk, module.pk, student.pk)
        return awards

    def reset_quiz(self, actor, student, quiz: Quiz) -> int:
        """
        Delete every attempt of one quiz so the student starts at attempt 1.

        Returns:
            Number of deleted attempts
        """
        with transaction.atomic():
            deleted, _ = QuizAttempt.objects.filter(student=student, quiz=quiz).delete()
            AuditLog.record(
                actor, "reset_quiz", "user", student.pk, quiz_id=quiz.pk, deleted_attempts=deleted
            )
        self.logger.info("Staff %s reset quiz %s for user %s", actor.pk, quiz.pk, student.pk)
        return deleted

    def reset_progress(self, actor, student, course: Course) -> Dict[str, int]:
        """
        Wipe a student's progress in a course and start over.

        Deletes module progress, lesson progress, quiz attempts, milestone
        awards and the certificate of the course, then re-initialises the module lock
        state. All or nothing.

        Returns:
            Number of deleted rows per table
        """
        with transaction.atomic():
            counts = {
                "module_progress": ModuleProgress.objects.filter(
                    student=student, module__course=course
                ).delete()[0],
                "lesson_progress": LessonProgress.objects.filter(
                    student=student, lesson__module__course=course
                ).delete()[0],
                "quiz_attempts": QuizAttempt.objects.filter(
                    student=student, quiz__module__course=course
                ).delete()[0],
                "milestone_awards": MilestoneAward.objects.filter(
                    student=student, milestone__course=course
                ).delete()[0],
                "certificates": Certificate.objects.filter(
                    student=student, course=course
                ).delete()[0],
            }
            self.progression.initialize_module_progress(student, course)
            AuditLog.record(actor, "reset_progress", "user", student.pk, course_id=course.pk, **counts)
        self.logger.warning(
            "Staff %s reset progress of user %s in course %s: %s",
            actor.pk,
            student.pk,
            course.pk,
            counts,
        )
        return counts

    def grant_certificate(self, actor, student, course: Course) -> Certificate:
        with transaction.atomic():
            certificate, created = self.certificates.grant_certificate(
                student, course, override=True
            )
            AuditLog.record(
                actor,
                "grant_certificate",
                "user",
                student.pk,
                course_id=course.pk,
                certificate_code=certificate.certificate_code,
                created=created,
            )
        return certificate

    # --- Catalogue ---

    def update_passing_score(self, actor, course: Course, passing_score: int) -> Course:
        if not 1 <= passing_score <= 100:
            raise ValueError("passing_score must be between 1 and 100")
        with transaction.atomic():
            previous = course.passing_score
            course.passing_score = passing_score
            course.save(update_fields=["passing_score", "updated_at"])
            AuditLog.record(
                actor,
                "update_passing_score",
                "course",
                course.pk,
                previous=previous,
                passing_score=passing_score,
            )
        return course

    # --- Affiliates ---

    def update_affiliate_status(self, actor, affiliate: Affiliate, status: str, commission_rate: Optional[Decimal] = None) -> Affiliate:
        with transaction.atomic():
            affiliate.status = status
            fields = ["status", "updated_at"]
            if commission_rate is not None:
                affiliate.commission_rate = commission_rate
                fields.append("commission_rate")
            affiliate.save(update_fields=fields)
            AuditLog.record(
                actor,
                "update_affiliate_status",
                "affiliate",
                affiliate.pk,
                status=status,
                commission_rate=str(affiliate.commission_rate),
            )
        self.logger.info("Staff %s set affiliate %s to %s", actor.pk, affiliate.code, status)
        return affiliate

    def create_payout(self, actor, affiliate: Affiliate, amount: int) -> Payout:
        with transaction.atomic():
            payout = Payout.objects.create(affiliate=affiliate, amount=amount)
            AuditLog.record(actor, "create_payout", "affiliate", affiliate.pk, payout_id=payout.pk, amount=amount)
        return payout

    def mark_payout_paid(self, actor, payout: Payout) -> Payout:
        with transaction.atomic():
            payout.mark_paid()
            AuditLog.record(actor, "mark_payout_paid", "payout", payout.pk, amount=payout.amount)
        return payout

    # --- Student notes ---

    def add_note(self, actor, student, content: str) -> AdminNote:
        content = (content or "").strip()
        if not content:
            raise ValueError("Note cannot be empty")
        with transaction.atomic():
            note = AdminNote.objects.create(student=student, author=actor, content=content)
            AuditLog.record(actor, "add_note", "user", student.pk, note_id=note.pk)
        return note

    def delete_note(self, actor, note: AdminNote) -> None:
        with transaction.atomic():
            note_id, student_id = note.pk, note.student_id
            note.delete()
            AuditLog.record(actor, "delete_note", "user", student_id, note_id=note_id)
        self.logger.info("Staff %s deleted note %s of user %s", actor.pk, note_id, student_id)

    # --- Live sessions ---

    def create_live_session(
        self,
        actor,
        *,
        title: str,
        scheduled_at: datetime,
        join_url: str,
        description: str = "",
        duration_minutes: Optional[int] = None,
    ) -> LiveSession:
        with transaction.atomic():
            session = LiveSession.objects.create(
                title=title,
                description=description,
                scheduled_at=scheduled_at,
                duration_minutes=duration_minutes or 60,
                join_url=join_url,
            )
            AuditLog.record(
                actor,
                "create_live_session",
                "live_session",
                session.pk,
                scheduled_at=scheduled_at.isoformat(),
            )
        self.logger.info("Staff %s scheduled live session %s", actor.pk, session.pk)
        return session

    def update_question_status(self, actor, question: LiveQuestion, status: str) -> LiveQuestion:
        """
        Moderate a live question. Answering stamps ``answered_at``.
        """
        if status not in LiveQuestion.Status.values:
            raise ValueError(f"Unknown question status: {status}")
        with transaction.atomic():
            question.status = status
            fields = ["status"]
            if status == LiveQuestion.Status.ANSWERED:
                question.answered_at = timezone.now()
                fields.append("answered_at")
            question.save(update_fields=fields)
            AuditLog.record(
                actor, "update_question_status", "live_question", question.pk, status=status
            )
        return question

    def add_session_replay(self, actor, session: LiveSession, replay_url: str, notes: Optional[str] = None) -> LiveSession:
        """Publish the recording of a session; notes are only replaced when given."""
        with transaction.atomic():
            session.replay_url = replay_url
            fields = ["replay_url"]
            if notes:
                session.notes = notes
                fields.append("notes")
            session.save(update_fields=fields)
            AuditLog.record(actor, "add_session_replay", "live_session", session.pk, replay_url=replay_url)
        return session
