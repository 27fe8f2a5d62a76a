"""
Progression Service für DSP E-Learning Platform

Service for the course progression engine. It owns every mutation of
ModuleProgress, QuizAttempt and MilestoneAward:

- Initialising module lock state when a student is enrolled
- Scoring quiz submissions against the resolved passing score
- Completing modules and unlocking the next required module
- Evaluating milestone triggers after every advance

State machine per (student, module), linear without back-transitions:

    LOCKED -> UNLOCKED -> COMPLETED

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction

from ...exceptions import ModuleLocked
from ...lessons.models import LessonProgress
from ...modules.models import (
    Course,
    Milestone,
    MilestoneAward,
    Module,
    ModuleProgress,
)
from ...quizzes.models import Quiz, QuizAttempt
from ...users.models import Profile

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
TWO_PLACES = Decimal("0.01")


def raw_score(correct: int, total: int) -> Decimal:
    """
    Unrounded percentage of correct answers.

    A quiz without questions scores 0.
    """
    if total <= 0:
        return Decimal("0")
    return Decimal(correct) * HUNDRED / Decimal(total)


def calculate_score(correct: int, total: int) -> Decimal:
    """
    Percentage of correct answers rounded half-up to two decimal places.

    Example:
        >>> calculate_score(2, 3)
        Decimal('66.67')
    """
    return raw_score(correct, total).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def grade_answers(questions: Iterable, answers: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Grade submitted answers against the questions of a quiz.

    Only the first answer per question counts. Answers to questions that do
    not belong to the quiz are kept in the record and graded as incorrect.

    Args:
        questions: Question instances of the quiz
        answers: Submitted ``{"question_id", "selected_option_id"}`` items

    Returns:
        Ordered list of ``{"question_id", "selected_option_id", "correct"}``
    """
    correct_options = {str(q.id): str(q.correct_option_id) for q in questions}
    graded = []
    seen = set()
    for answer in answers:
        question_id = str(answer["question_id"])
        if question_id in seen:
            continue
        seen.add(question_id)
        selected = answer.get("selected_option_id")
        selected = None if selected is None else str(selected)
        expected = correct_options.get(question_id)
        graded.append(
            {
                "question_id": question_id,
                "selected_option_id": selected,
                "correct": expected is not None and selected == expected,
            }
        )
    return graded


def _lesson_entry(lesson, progress: Optional[LessonProgress]) -> Dict[str, Any]:
    return {
        "id": lesson.id,
        "title": lesson.title,
        "order": lesson.order,
        "completed": progress is not None and progress.completed,
        "watched_percent": progress.watched_percent if progress is not None else 0.0,
    }


@dataclass
class QuizSubmissionResult:
    """Outcome of a single quiz submission."""

    attempt: QuizAttempt
    score: Decimal
    passed: bool
    passing_score: int
    correct_count: int
    total_questions: int
    new_milestones: List[MilestoneAward] = field(default_factory=list)


class ProgressionService:
    """
    Service für den Lernfortschritt.

    Every public method that writes runs inside a single transaction so that
    a quiz submission, the module advance and the milestone awards it causes
    commit together.
    """

    def __init__(self):
        self.logger = logger

    # --- Initialisation ---

    def initialize_module_progress(self, student, course: Course) -> int:
        """
        Create the progress rows of every module of a course for a student.

        The first required module and every bonus module start UNLOCKED, all
        others LOCKED. Existing rows are left untouched, so calling this
        twice never clobbers progress.

        Args:
            student: Enrolled user
            course: Course to initialise

        Returns:
            Number of newly created rows
        """
        modules = list(course.ordered_modules())
        first_required = next((m for m in modules if not m.is_bonus), None)
        existing = set(
            ModuleProgress.objects.filter(
                student=student, module__course=course
            ).values_list("module_id", flat=True)
        )

        rows = [
            ModuleProgress(
                student=student,
                module=module,
                status=(
                    ModuleProgress.Status.UNLOCKED
                    if module.is_bonus or module == first_required
                    else ModuleProgress.Status.LOCKED
                ),
            )
            for module in modules
            if module.id not in existing
        ]
        if rows:
            ModuleProgress.objects.bulk_create(rows, ignore_conflicts=True)
        self.logger.info(
            "Initialised %s progress rows for user %s in course %s",
            len(rows),
            student.pk,
            course.pk,
        )
        return len(rows)

    # --- Quiz submission ---

    def submit_quiz(self, student, quiz: Quiz, answers: List[Dict[str, Any]]) -> QuizSubmissionResult:
        """
        Score a quiz submission, record the attempt and advance on a pass.

        Args:
            student: Submitting user
            quiz: Quiz being answered
            answers: List of ``{"question_id", "selected_option_id"}``

        Returns:
            QuizSubmissionResult with the persisted attempt

        Raises:
            ModuleLocked: If the quiz's module is locked or not initialised
        """
        with transaction.atomic():
            # Lock the progress row so concurrent submissions of the same
            # student for this module are numbered one after the other.
            progress = (
                ModuleProgress.objects.select_for_update()
                .filter(student=student, module_id=quiz.module_id)
                .first()
            )
            if progress is None or progress.is_locked:
                raise ModuleLocked(details={"quiz_id": quiz.pk, "module_id": quiz.module_id})

            questions = list(quiz.questions.all())
            graded = grade_answers(questions, answers)
            correct_count = sum(1 for item in graded if item["correct"])
            total = len(questions)

            passing_score = quiz.resolved_passing_score
            passed = total > 0 and raw_score(correct_count, total) >= passing_score
            score = calculate_score(correct_count, total)

            attempt_number = (
                QuizAttempt.objects.filter(student=student, quiz=quiz).count() + 1
            )
            attempt = QuizAttempt.objects.create(
                student=student,
                quiz=quiz,
                score=score,
                passed=passed,
                attempt_number=attempt_number,
                answers=graded,
            )

            new_milestones = []
            if passed:
                new_milestones = self.advance_module(student, quiz.module)

            Profile.objects.filter(user=student).update(last_activity_at=attempt.created_at)

        self.logger.info(
            "Quiz %s attempt #%s by user %s: score=%s passed=%s",
            quiz.pk,
            attempt_number,
            student.pk,
            score,
            passed,
        )
        return QuizSubmissionResult(
            attempt=attempt,
            score=score,
            passed=passed,
            passing_score=passing_score,
            correct_count=correct_count,
            total_questions=total,
            new_milestones=new_milestones,
        )

    # --- Module advance ---

    def advance_module(self, student, module: Module) -> List[MilestoneAward]:
        """
        Complete a module and unlock the next required module.

        Bonus modules unlock nothing. A next module that is already unlocked
        or completed keeps its status.

        Args:
            student: User completing the module
            module: Module to complete

        Returns:
            Milestone awards created by this advance
        """
        with transaction.atomic():
            progress, _ = ModuleProgress.objects.select_for_update().get_or_create(
                student=student,
                module=module,
                defaults={"status": ModuleProgress.Status.UNLOCKED},
            )
            progress.mark_completed()

            if not module.is_bonus:
                next_module = module.next_required_module()
                if next_module is not None:
                    self._unlock(student, next_module)

            return self.evaluate_milestones(student, module.course)

    def _unlock(self, student, module: Module) -> bool:
        progress, created = ModuleProgress.objects.get_or_create(
            student=student,
            module=module,
            defaults={"status": ModuleProgress.Status.UNLOCKED},
        )
        if created:
            return True
        if progress.status == ModuleProgress.Status.LOCKED:
            progress.status = ModuleProgress.Status.UNLOCKED
            progress.save(update_fields=["status", "updated_at"])
            return True
        return False

    # --- Milestones ---

    def evaluate_milestones(self, student, course: Course) -> List[MilestoneAward]:
        """
        Award every milestone whose trigger currently holds.

        Percentage bands are half-open and evaluated on the current state
        only, so a jump across several bands awards just the band reached.

        Returns:
            Newly created awards (existing awards are not repeated)
        """
        required_ids = list(course.required_modules().values_list("id", flat=True))
        total = len(required_ids)
        completed = ModuleProgress.objects.filter(
            student=student,
            module_id__in=required_ids,
            status=ModuleProgress.Status.COMPLETED,
        ).count()

        triggers = []
        if completed == 1:
            triggers.append(Milestone.Trigger.FIRST_MODULE)
        if total:
            percent = completed * 100
            if 25 * total <= percent < 50 * total:
                triggers.append(Milestone.Trigger.QUARTER)
            elif 50 * total <= percent < 75 * total:
                triggers.append(Milestone.Trigger.HALF)
            elif 75 * total <= percent < 100 * total:
                triggers.append(Milestone.Trigger.THREE_QUARTER)
            elif percent >= 100 * total:
                triggers.append(Milestone.Trigger.COURSE_COMPLETE)

        if QuizAttempt.objects.filter(
            student=student, quiz__module__course=course, passed=True
        ).exists():
            triggers.append(Milestone.Trigger.FIRST_QUIZ_PASS)

        awards = []
        for trigger in triggers:
            award = self._award(student, course, trigger)
            if award is not None:
                awards.append(award)
        return awards

    def _award(self, student, course: Course, trigger: str) -> Optional[MilestoneAward]:
        milestone = Milestone.objects.filter(course=course, trigger_type=trigger).first()
        if milestone is None:
            return None
        award, created = MilestoneAward.objects.get_or_create(
            student=student, milestone=milestone
        )
        if not created:
            return None
        self.logger.info("User %s earned milestone %s", student.pk, trigger)
        return award

    # --- Read helpers ---

    def quiz_for_student(self, student, quiz: Quiz) -> bool:
        """
        Check quiz access for a student.

        Returns:
            True if the student already passed the quiz, which allows
            revealing the correct answers

        Raises:
            ModuleLocked: If the quiz's module is locked or not initialised
        """
        progress = ModuleProgress.objects.filter(
            student=student, module_id=quiz.module_id
        ).first()
        if progress is None or progress.is_locked:
            raise ModuleLocked(details={"quiz_id": quiz.pk})
        return QuizAttempt.objects.filter(student=student, quiz=quiz, passed=True).exists()

    def student_progress(self, student, course: Course) -> Dict[str, Any]:
        """
        Build the progress overview of a student in a course.

        Returns:
            Dictionary with the ordered modules, their status, lessons and
            quiz attempts, plus completion counters
        """
        statuses = dict(
            ModuleProgress.objects.filter(
                student=student, module__course=course
            ).values_list("module_id", "status")
        )
        attempts_by_quiz: Dict[int, List[QuizAttempt]] = {}
        for attempt in QuizAttempt.objects.filter(
            student=student, quiz__module__course=course
        ).order_by("attempt_number"):
            attempts_by_quiz.setdefault(attempt.quiz_id, []).append(attempt)
        lesson_progress = {
            p.lesson_id: p
            for p in LessonProgress.objects.filter(
                student=student, lesson__module__course=course
            )
        }

        modules = []
        completed_required = 0
        total_required = 0
        for module in course.ordered_modules().select_related("quiz").prefetch_related("lessons"):
            status = statuses.get(module.id, ModuleProgress.Status.LOCKED)
            if not module.is_bonus:
                total_required += 1
                if status == ModuleProgress.Status.COMPLETED:
                    completed_required += 1

            quiz_data = None
            quiz = getattr(module, "quiz", None)
            if quiz is not None:
                attempts = attempts_by_quiz.get(quiz.id, [])
                quiz_data = {
                    "id": quiz.id,
                    "title": quiz.title,
                    "passing_score": quiz.passing_score
                    if quiz.passing_score is not None
                    else course.passing_score,
                    "passed": any(a.passed for a in attempts),
                    "attempts": [
                        {
                            "attempt_number": a.attempt_number,
                            "score": a.score,
                            "passed": a.passed,
                            "created_at": a.created_at,
                        }
                        for a in attempts
                    ],
                }

            modules.append(
                {
                    "id": module.id,
                    "title": module.title,
                    "order": module.order,
                    "is_bonus": module.is_bonus,
                    "status": status,
                    "quiz": quiz_data,
                    "lessons": [
                        _lesson_entry(lesson, lesson_progress.get(lesson.id))
                        for lesson in sorted(module.lessons.all(), key=lambda l: l.order)
                    ],
                }
            )

        percent = (
            calculate_score(completed_required, total_required)
            if total_required
            else Decimal("0.00")
        )
        return {
            "course_id": course.id,
            "completed_required": completed_required,
            "total_required": total_required,
            "percent_complete": percent,
            "modules": modules,
        }
