"""
E-Learning Course & Module System Models

This module defines the catalogue and progression models of the E-Learning
system: the course catalogue that admins maintain, and the per-student
progress records that the progression engine owns.

Models:
- Course: Purchasable course with pricing and passing rules
- Module: Ordered learning unit inside a course (required or bonus)
- Enrollment: Access grant of a student to a course
- ModuleProgress: Per-student lock state of a module
- Milestone: Achievement a course offers for a progress trigger
- MilestoneAward: Milestone earned by a student

Features:
- Strictly ordered required modules with independent bonus modules
- Linear LOCKED -> UNLOCKED -> COMPLETED progress state machine
- Store-level uniqueness for every at-most-once record

Author: DSP Development Team
Version: 1.0.0
"""

import math

from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db.models import QuerySet
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Course(models.Model):
    """
    Purchasable course.

    Prices are stored in minor currency units (cents) to keep all payment
    arithmetic in integers. The passing score applies to every quiz of the
    course that does not define its own override.

    Attributes:
        title: Display title
        slug: Unique URL identifier
        price: Full price in minor currency units
        currency: ISO currency code used for checkout
        passing_score: Default passing score in percent (1-100)
        installments_count: Number of monthly charges for installment plans
        is_published: Only published courses can be purchased

    Example:
        >>> course = Course.objects.create(title="Python", slug="python", price=30000)
        >>> course.installment_amount
        10000
    """

    title = models.CharField(
        max_length=200,
        verbose_name=_("Course Title"),
        help_text=_("The title of the course"),
    )

    slug = models.SlugField(
        max_length=200,
        unique=True,
        verbose_name=_("Slug"),
        help_text=_("Unique URL identifier of the course"),
    )

    description = models.TextField(blank=True, default="")

    price = models.PositiveIntegerField(
        verbose_name=_("Price"),
        help_text=_("Full price in minor currency units (e.g. cents)"),
    )

    currency = models.CharField(max_length=3, default="usd")

    passing_score = models.PositiveSmallIntegerField(
        default=80,
        validators=[MinValueValidator(1), MaxValueValidator(100)],
        verbose_name=_("Passing Score"),
        help_text=_("Default quiz passing score in percent"),
    )

    installments_count = models.PositiveSmallIntegerField(
        default=3,
        validators=[MinValueValidator(1)],
        verbose_name=_("Installments"),
        help_text=_("Number of monthly charges for the installment plan"),
    )

    is_published = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Course")
        verbose_name_plural = _("Courses")
        ordering = ["title"]
        db_table = "elearning_course"

    def __str__(self) -> str:
        return self.title

    @property
    def installment_amount(self) -> int:
        """Amount of a single installment, rounded up to the next minor unit."""
        return math.ceil(self.price / self.installments_count)

    def ordered_modules(self) -> QuerySet["Module"]:
        return self.modules.order_by("order")

    def required_modules(self) -> QuerySet["Module"]:
        """All non-bonus modules in course order."""
        return self.modules.filter(is_bonus=False).order_by("order")


class Module(models.Model):
    """
    Ordered learning unit inside a course.

    Required modules form a strict sequence: a module unlocks when its
    predecessor in that sequence is completed. Bonus modules sit outside the
    sequence; they start unlocked and never unlock anything.

    Attributes:
        course: Owning course
        title: Module title
        order: Position within the course (unique per course)
        is_bonus: Bonus modules are optional and excluded from completion math
    """

    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="modules",
        verbose_name=_("Course"),
        help_text=_("The course this module belongs to"),
    )

    title = models.CharField(
        max_length=200,
        verbose_name=_("Module Title"),
        help_text=_("The title of the learning module"),
    )

    description = models.TextField(blank=True, default="")

    order = models.PositiveIntegerField(
        verbose_name=_("Order"),
        help_text=_("Position of the module within the course"),
    )

    is_bonus = models.BooleanField(
        default=False,
        verbose_name=_("Bonus Module"),
        help_text=_(
            "Bonus modules are always unlocked and do not count towards "
            "course completion."
        ),
    )

    def __str__(self) -> str:
        return f"{self.course.title} - {self.title}"

    class Meta:
        verbose_name = _("Learning Module")
        verbose_name_plural = _("Learning Modules")
        ordering = ["course", "order"]
        db_table = "elearning_module"
        constraints = [
            models.UniqueConstraint(
                fields=["course", "order"], name="unique_module_order_per_course"
            ),
        ]

    def next_required_module(self) -> "Module | None":
        """
        Get the required module that follows this one in course order.

        Returns:
            The next non-bonus module, or None for the last module
        """
        return (
            Module.objects.filter(
                course_id=self.course_id, is_bonus=False, order__gt=self.order
            )
            .order_by("order")
            .first()
        )


class Enrollment(models.Model):
    """
    Access grant of a student to a course.

    Created by the payment reconciler when a checkout settles, or by staff.
    """

    class Source(models.TextChoices):
        PURCHASE = "purchase", _("Purchase")
        ADMIN = "admin", _("Admin")

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="enrollments",
    )
    course = models.ForeignKey(
        Course, on_delete=models.CASCADE, related_name="enrollments"
    )
    source = models.CharField(
        max_length=20, choices=Source.choices, default=Source.PURCHASE
    )
    reference = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text=_("External reference, e.g. the checkout session id"),
    )
    enrolled_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Enrollment")
        verbose_name_plural = _("Enrollments")
        db_table = "elearning_enrollment"
        constraints = [
            models.UniqueConstraint(
                fields=["student", "course"], name="unique_enrollment_per_course"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.student} -> {self.course}"


class ModuleProgress(models.Model):
    """
    Per-student lock state of a single module.

    State machine (no back-transitions outside an explicit admin reset):

        LOCKED -> UNLOCKED -> COMPLETED

    Rows are created in bulk when the student is enrolled and are only
    deleted by the admin progress reset.
    """

    class Status(models.TextChoices):
        LOCKED = "locked", _("Locked")
        UNLOCKED = "unlocked", _("Unlocked")
        COMPLETED = "completed", _("Completed")

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="module_progress",
        verbose_name=_("Student"),
    )

    module = models.ForeignKey(
        Module,
        on_delete=models.CASCADE,
        related_name="progress",
        verbose_name=_("Module"),
    )

    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.LOCKED,
        verbose_name=_("Status"),
    )

    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Module Progress")
        verbose_name_plural = _("Module Progress")
        db_table = "elearning_module_progress"
        constraints = [
            models.UniqueConstraint(
                fields=["student", "module"], name="unique_progress_per_module"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.student} - {self.module.title}: {self.status}"

    @property
    def is_locked(self) -> bool:
        return self.status == self.Status.LOCKED

    def mark_completed(self) -> None:
        """
        Mark the module as completed for the student.

        Safe to call repeatedly; the completion timestamp is set only once.
        """
        if self.status == self.Status.COMPLETED:
            return
        self.status = self.Status.COMPLETED
        self.completed_at = timezone.now()
        self.save(update_fields=["status", "completed_at", "updated_at"])


class Milestone(models.Model):
    """
    Achievement that a course offers for one progress trigger.

    A trigger only produces an award if the course defines a milestone for it.
    """

    class Trigger(models.TextChoices):
        FIRST_MODULE = "first_module", _("First module completed")
        FIRST_QUIZ_PASS = "first_quiz_pass", _("First quiz passed")
        QUARTER = "quarter", _("25% completed")
        HALF = "half", _("50% completed")
        THREE_QUARTER = "three_quarter", _("75% completed")
        COURSE_COMPLETE = "course_complete", _("Course completed")

    course = models.ForeignKey(
        Course, on_delete=models.CASCADE, related_name="milestones"
    )
    trigger_type = models.CharField(max_length=20, choices=Trigger.choices)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    badge_emoji = models.CharField(max_length=16, blank=True, default="")

    class Meta:
        verbose_name = _("Milestone")
        verbose_name_plural = _("Milestones")
        db_table = "elearning_milestone"
        constraints = [
            models.UniqueConstraint(
                fields=["course", "trigger_type"], name="unique_milestone_trigger"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.badge_emoji} {self.title}".strip()


class MilestoneAward(models.Model):
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="milestone_awards",
    )
    milestone = models.ForeignKey(
        Milestone, on_delete=models.CASCADE, related_name="awards"
    )
    awarded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Milestone Award")
        verbose_name_plural = _("Milestone Awards")
        db_table = "elearning_milestone_award"
        constraints = [
            models.UniqueConstraint(
                fields=["student", "milestone"], name="unique_award_per_milestone"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.student} earned {self.milestone}"
