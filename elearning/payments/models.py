"""
E-Learning Payment Ledger Models

This module defines the payment ledger that the Stripe reconciler owns.

Models:
- Payment: One checkout attempt of a student for a course

Webhook events themselves are stored and de-duplicated by dj-stripe
(`djstripe.models.Event`); this module only holds the ledger.

Payment lifecycle:

    PENDING --checkout settled--> ACTIVE (installment) / COMPLETED (one-time)
    PENDING --superseded checkout expired--> CANCELLED
    CANCELLED (superseded, never settled) --session paid anyway--> ACTIVE / COMPLETED
    ACTIVE  --last installment--> COMPLETED
    ACTIVE  --charge failed-----> PAST_DUE
    ACTIVE/PAST_DUE --subscription cancelled before full payment--> CANCELLED

COMPLETED is terminal; CANCELLED is terminal once a charge was booked.

Author: DSP Development Team
Version: 1.0.0
"""

import math

from django.db import models
from django.conf import settings
from django.db.models import F, Q
from django.utils.translation import gettext_lazy as _

from ..modules.models import Course


class Payment(models.Model):
    """
    One checkout attempt of a student for a course.

    All amounts are integers in minor currency units. Every Stripe Checkout
    Session gets its own row, so a paid session always finds its payment.
    At most one ACTIVE, PAST_DUE or COMPLETED payment exists per
    (student, course); the partial unique constraint enforces this at the
    store level.

    Attributes:
        external_checkout_id: Stripe Checkout Session id (unique)
        external_subscription_id: Stripe Subscription id (installment plans)
        external_customer_id: Stripe Customer id stamped on settlement
        payment_type: ONE_TIME or INSTALLMENT
        status: Lifecycle state (see module docstring)
        amount_total: Full price charged over the payment's lifetime
        amount_paid: Sum of settled charges, never above amount_total
        installments_total: Number of charges (1 for one-time payments)
        installments_paid: Settled charges, never above installments_total
    """

    class PaymentType(models.TextChoices):
        ONE_TIME = "one_time", _("One-time")
        INSTALLMENT = "installment", _("Installment")

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        ACTIVE = "active", _("Active")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")
        PAST_DUE = "past_due", _("Past due")

    # Statuses that hold a paid (or being paid) seat in the course
    PAID_STATUSES = (Status.ACTIVE, Status.COMPLETED, Status.PAST_DUE)

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="payments",
        verbose_name=_("Student"),
    )

    course = models.ForeignKey(
        Course,
        on_delete=models.PROTECT,
        related_name="payments",
        verbose_name=_("Course"),
    )

    external_checkout_id = models.CharField(
        max_length=255,
        unique=True,
        verbose_name=_("Checkout Session ID"),
        help_text=_("Stripe Checkout Session id"),
    )

    external_subscription_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_("Subscription ID"),
        help_text=_("Stripe Subscription id for installment plans"),
    )

    external_customer_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        verbose_name=_("Customer ID"),
    )

    payment_type = models.CharField(
        max_length=12,
        choices=PaymentType.choices,
        default=PaymentType.ONE_TIME,
        verbose_name=_("Payment Type"),
    )

    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
        verbose_name=_("Status"),
    )

    amount_total = models.PositiveIntegerField(verbose_name=_("Total Amount"))
    amount_paid = models.PositiveIntegerField(default=0, verbose_name=_("Amount Paid"))
    installments_total = models.PositiveSmallIntegerField(default=1)
    installments_paid = models.PositiveSmallIntegerField(default=0)
    currency = models.CharField(max_length=3, default="usd")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at"]
        db_table = "elearning_payment"
        constraints = [
            models.UniqueConstraint(
                fields=["student", "course"],
                condition=Q(status__in=["active", "completed", "past_due"]),
                name="unique_paid_payment_per_course",
            ),
            models.CheckConstraint(
                condition=Q(amount_paid__lte=F("amount_total")),
                name="payment_amount_paid_lte_total",
            ),
            models.CheckConstraint(
                condition=Q(installments_paid__lte=F("installments_total")),
                name="payment_installments_paid_lte_total",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.student} - {self.course} ({self.status})"

    @property
    def is_settled(self) -> bool:
        """True once the checkout has been confirmed (ACTIVE or COMPLETED)."""
        return self.status in (self.Status.ACTIVE, self.Status.COMPLETED)

    @property
    def awaits_settlement(self) -> bool:
        """
        True while a completed checkout may still settle this payment:
        PENDING, or CANCELLED as a superseded checkout without any charge.
        """
        if self.status == self.Status.PENDING:
            return True
        return self.status == self.Status.CANCELLED and self.installments_paid == 0

    @property
    def is_fully_paid(self) -> bool:
        if self.payment_type == self.PaymentType.ONE_TIME:
            return self.status == self.Status.COMPLETED
        return self.installments_paid >= self.installments_total

    @property
    def installment_amount(self) -> int:
        """One installment unit, rounded up to the next minor unit."""
        return math.ceil(self.amount_total / max(self.installments_total, 1))

