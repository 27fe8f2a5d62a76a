"""
Affiliate Attribution Service für DSP E-Learning Platform

Service for the affiliate program:
- Referral code generation and affiliate applications
- Click tracking for approved affiliates
- Binding referral codes to student profiles
- Commission attribution when a referred purchase settles
- Statistics for the affiliate dashboard

Author: DSP Development Team
Version: 1.0.0
"""

import logging
import re
import secrets
import string
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Tuple

from django.db import IntegrityError, transaction
from django.db.models import Sum

from ...affiliates.models import Affiliate, AffiliateClick, AffiliateConversion, Payout
from ...payments.models import Payment
from ...users.models import Profile

logger = logging.getLogger(__name__)

SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def calculate_commission(amount: int, rate: Decimal) -> int:
    """
    Commission in minor units, rounded half-up.

    Example:
        >>> calculate_commission(30000, Decimal("20.00"))
        6000
    """
    value = Decimal(amount) * Decimal(rate) / Decimal("100")
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def generate_affiliate_code(user) -> str:
    """
    Build a referral code like ``REF-JOHNDO-7K2Q`` from the user's name.
    """
    name = user.get_full_name() or user.username or ""
    prefix = re.sub(r"[^A-Za-z0-9]", "", name)[:6].upper() or "USER"
    suffix = "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(4))
    return f"REF-{prefix}-{suffix}"


class AffiliateService:
    """
    Service für das Partnerprogramm.
    """

    def __init__(self):
        self.logger = logger

    def apply_for_affiliate(self, user) -> Tuple[Affiliate, bool]:
        """
        Register the user as affiliate (status PENDING).

        Calling it again returns the existing affiliate.

        Returns:
            Tuple of (affiliate, created)
        """
        existing = Affiliate.objects.filter(user=user).first()
        if existing is not None:
            return existing, False

        for _ in range(5):
            try:
                with transaction.atomic():
                    affiliate = Affiliate.objects.create(
                        user=user, code=generate_affiliate_code(user)
                    )
                self.logger.info("User %s applied as affiliate %s", user.pk, affiliate.code)
                return affiliate, True
            except IntegrityError:
                existing = Affiliate.objects.filter(user=user).first()
                if existing is not None:
                    return existing, False
        raise IntegrityError("Could not generate a unique affiliate code")

    def track_click(self, code: str, ip_address: Optional[str] = None, user_agent: str = "") -> Optional[AffiliateClick]:
        """
        Record a click on a referral link.

        Clicks on unknown or not approved codes are ignored.
        """
        affiliate = Affiliate.objects.filter(
            code=code, status=Affiliate.Status.APPROVED
        ).first()
        if affiliate is None:
            self.logger.debug("Ignoring click for unknown or unapproved code %s", code)
            return None
        return AffiliateClick.objects.create(
            affiliate=affiliate,
            ip_address=ip_address or None,
            user_agent=(user_agent or "")[:1000],
        )

    def bind_referral(self, user, code: Optional[str]) -> bool:
        """
        Bind a referral code from the cookie to the user's profile.

        The first code wins; later referrals never overwrite it.
        """
        if not code or user is None or not user.is_authenticated:
            return False
        profile, _ = Profile.objects.get_or_create(user=user)
        return profile.bind_referral_code(code)

    def attribute_conversion(self, payment: Payment) -> Optional[AffiliateConversion]:
        """
        Create the affiliate conversion of a newly settled payment.

        Must run inside the transaction that settles the payment, and only
        when the payment was not settled before; the one-to-one link to the
        payment rejects a second conversion in any case.

        Self-referrals and codes of affiliates that are not approved earn
        nothing.

        Returns:
            The conversion, or None if nothing was attributed
        """
        profile = Profile.objects.filter(user_id=payment.student_id).first()
        code = profile.referral_code if profile else None
        if not code:
            return None

        affiliate = Affiliate.objects.filter(
            code=code, status=Affiliate.Status.APPROVED
        ).first()
        if affiliate is None:
            return None
        if affiliate.user_id == payment.student_id:
            self.logger.info("Skipping self-referral of user %s", payment.student_id)
            return None

        commission = calculate_commission(payment.amount_total, affiliate.commission_rate)
        try:
            with transaction.atomic():
                conversion = AffiliateConversion.objects.create(
                    affiliate=affiliate,
                    payment=payment,
                    student_id=payment.student_id,
                    amount=payment.amount_total,
                    commission=commission,
                )
        except IntegrityError:
            self.logger.info("Payment %s already has a conversion", payment.pk)
            return None

        self.logger.info(
            "Affiliate %s earned %s on payment %s",
            affiliate.code,
            commission,
            payment.pk,
        )
        return conversion

    def affiliate_stats(self, user) -> Optional[Dict[str, Any]]:
        """
        Dashboard numbers of an affiliate.

        Returns:
            None if the user is not an affiliate
        """
        affiliate = Affiliate.objects.filter(user=user).first()
        if affiliate is None:
            return None

        total_commission = (
            affiliate.conversions.aggregate(total=Sum("commission"))["total"] or 0
        )
        total_paid = (
            affiliate.payouts.filter(status=Payout.Status.PAID).aggregate(
                total=Sum("amount")
            )["total"]
            or 0
        )
        return {
            "affiliate": affiliate,
            "total_clicks": affiliate.clicks.count(),
            "total_conversions": affiliate.conversions.count(),
            "total_commission": total_commission,
            "total_paid": total_paid,
            "balance": total_commission - total_paid,
            "recent_conversions": list(affiliate.conversions.order_by("-created_at")[:10]),
            "payouts": list(affiliate.payouts.order_by("-created_at")),
        }
