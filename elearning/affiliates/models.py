"""
E-Learning Affiliate Models

This module defines the affiliate program: affiliates share a referral code,
clicks on that code are tracked, and completed purchases of referred students
become conversions that earn commission until they are paid out.

Models:
- Affiliate: Referral partner with code, status and commission rate
- AffiliateClick: One tracked click on a referral link
- AffiliateConversion: Commission earned from one completed payment
- Payout: Commission settlement for an affiliate

Author: DSP Development Team
Version: 1.0.0
"""

from decimal import Decimal

from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Affiliate(models.Model):
    """
    Referral partner.

    Only APPROVED affiliates record clicks and earn commission.

    Attributes:
        user: Affiliate user account
        code: Unique referral code shared in links (``?ref=CODE``)
        status: Review status set by staff
        commission_rate: Commission in percent of the payment total
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        APPROVED = "approved", _("Approved")
        REJECTED = "rejected", _("Rejected")

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="affiliate",
        verbose_name=_("User"),
    )

    code = models.CharField(
        max_length=64,
        unique=True,
        verbose_name=_("Referral Code"),
        help_text=_("Code used in referral links"),
    )

    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.PENDING,
        verbose_name=_("Status"),
    )

    commission_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("20.00"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        verbose_name=_("Commission Rate"),
        help_text=_("Commission in percent of the payment total"),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Affiliate")
        verbose_name_plural = _("Affiliates")
        ordering = ["-created_at"]
        db_table = "elearning_affiliate"

    def __str__(self) -> str:
        return f"{self.code} ({self.user})"

    @property
    def is_approved(self) -> bool:
        return self.status == self.Status.APPROVED


class AffiliateClick(models.Model):
    affiliate = models.ForeignKey(
        Affiliate, on_delete=models.CASCADE, related_name="clicks"
    )
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Affiliate Click")
        verbose_name_plural = _("Affiliate Clicks")
        db_table = "elearning_affiliate_click"


class AffiliateConversion(models.Model):
    """
    Commission earned from one settled payment.

    The commission is computed once at creation and never changes. The
    one-to-one link to the payment guarantees a single conversion per
    payment even when the completion event is delivered twice.
    """

    affiliate = models.ForeignKey(
        Affiliate, on_delete=models.CASCADE, related_name="conversions"
    )
    payment = models.OneToOneField(
        "elearning.Payment",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="affiliate_conversion",
    )
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="referred_conversions",
    )
    amount = models.PositiveIntegerField(
        help_text=_("Payment total in minor currency units")
    )
    commission = models.PositiveIntegerField(
        help_text=_("Commission in minor currency units")
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Affiliate Conversion")
        verbose_name_plural = _("Affiliate Conversions")
        ordering = ["-created_at"]
        db_table = "elearning_affiliate_conversion"

    def __str__(self) -> str:
        return f"{self.affiliate.code}: {self.commission}"


class Payout(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")

    affiliate = models.ForeignKey(
        Affiliate, on_delete=models.CASCADE, related_name="payouts"
    )
    amount = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text=_("Payout amount in minor currency units"),
    )
    status = models.CharField(
        max_length=10, choices=Status.choices, default=Status.PENDING
    )
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Payout")
        verbose_name_plural = _("Payouts")
        ordering = ["-created_at"]
        db_table = "elearning_payout"

    def __str__(self) -> str:
        return f"{self.affiliate.code}: {self.amount} ({self.status})"

    def mark_paid(self) -> None:
        if self.status == self.Status.PAID:
            return
        self.status = self.Status.PAID
        self.paid_at = timezone.now()
        self.save(update_fields=["status", "paid_at"])
