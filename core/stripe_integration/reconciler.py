"""
Stripe Payment Reconciler (core.stripe_integration)
===================================================

Single owner of every Payment mutation. Both inbound paths, the Stripe
webhook (delivered through dj-stripe, see signals.py) and the client's
"verify my checkout" call, funnel into the same methods and converge on the
same end state.

Operations
----------
- create_checkout                    -> PENDING payment + Stripe redirect URL
- verify_checkout                    -> client path, re-checks with Stripe
- reconcile_checkout_completed       -> PENDING -> ACTIVE / COMPLETED, enroll, attribute
- reconcile_installment_charge       -> installments_paid += 1, COMPLETED on the last one
- reconcile_subscription_cancelled   -> CANCELLED unless fully paid
- reconcile_payment_failed           -> PAST_DUE unless fully paid
- handle_event                       -> dispatch of a parsed dj-stripe webhook event

Safety
------
- Each operation runs in one ``transaction.atomic()`` block and locks the
  payment row with ``select_for_update()``; whichever path arrives first
  settles the payment, the other sees it settled and does nothing.
- Enrollment, progress initialisation and affiliate attribution commit
  together with the payment update.
- Cancelling a fully paid subscription on Stripe runs after commit and is
  best effort; a failure is logged and the local COMPLETED state stays.
- Redelivered events are dropped by dj-stripe before they reach us; a
  replay that does get through finds the payment settled and is a no-op.

Author: DSP Development Team
Date: 2025-09-03
"""

import logging
from functools import partial
from typing import Any, Dict, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from elearning.exceptions import AlreadyPaid, Forbidden, NotFound
from elearning.modules.models import Course, Enrollment
from elearning.payments.models import Payment
from elearning.services.affiliates import AffiliateService
from elearning.services.enrollment import EnrollmentService

from .events import (
    CheckoutCompleted,
    InvoicePaid,
    InvoicePaymentFailed,
    StripeEvent,
    SubscriptionCancelled,
)
from .gateway import StripeGateway

logger = logging.getLogger(__name__)

FIRST_INVOICE_REASON = "subscription_create"
SETTLED_PAYMENT_STATUSES = ("paid", "no_payment_required")


class PaymentReconciler:
    """
    Reconciles Stripe state into the local payment ledger.
    """

    def __init__(
        self,
        gateway: Optional[StripeGateway] = None,
        enrollment: Optional[EnrollmentService] = None,
        affiliates: Optional[AffiliateService] = None,
    ):
        self.gateway = gateway or StripeGateway()
        self.enrollment = enrollment or EnrollmentService()
        self.affiliates = affiliates or AffiliateService()

    # ---------- read helpers ----------

    def has_active_payment(self, student, course: Course) -> bool:
        return Payment.objects.filter(
            student=student,
            course=course,
            status__in=[Payment.Status.ACTIVE, Payment.Status.COMPLETED],
        ).exists()

    def latest_payment(self, student, course: Course) -> Optional[Payment]:
        return (
            Payment.objects.filter(student=student, course=course)
            .order_by("-created_at", "-id")
            .first()
        )

    # ---------- checkout creation ----------

    def create_checkout(
        self,
        student,
        course: Course,
        payment_type: str,
        referral_code: Optional[str] = None,
    ) -> Tuple[Payment, str]:
        """
        Start a Stripe Checkout for a course and record a PENDING payment.

        Every checkout session gets its own payment row. Older PENDING
        checkouts of the same student and course are expired on Stripe first
        and marked CANCELLED, so only the newest session can still be paid.

        Args:
            student: Purchasing user
            course: Published course
            payment_type: ``one_time`` or ``installment``
            referral_code: Value of the referral cookie, if any

        Returns:
            Tuple of (payment, checkout_url)

        Raises:
            NotFound: If the course is not published
            AlreadyPaid: If the student already paid, or an older checkout
                of the course was completed and awaits reconciliation
            PaymentProviderError: If Stripe cannot create or expire a session
        """
        if not course.is_published:
            raise NotFound(details={"course_id": course.pk})

        if Payment.objects.filter(
            student=student, course=course, status__in=Payment.PAID_STATUSES
        ).exists():
            raise AlreadyPaid(details={"course_id": course.pk})

        self._expire_pending_checkouts(student, course)
        self.affiliates.bind_referral(student, referral_code)

        if payment_type == Payment.PaymentType.INSTALLMENT:
            installments_total = course.installments_count
            unit_amount = course.installment_amount
        else:
            installments_total = 1
            unit_amount = course.price

        session = self.gateway.create_checkout_session(
            course=course,
            student=student,
            payment_type=payment_type,
            unit_amount=unit_amount,
            success_url=(
                f"{settings.FRONTEND_URL}"
                f"/checkout/success?session_id={{CHECKOUT_SESSION_ID}}&course={course.pk}"
            ),
            cancel_url=f"{settings.FRONTEND_URL}/enroll?course={course.pk}",
        )

        payment = Payment.objects.create(
            student=student,
            course=course,
            external_checkout_id=session.id,
            payment_type=payment_type,
            amount_total=course.price,
            installments_total=installments_total,
            currency=course.currency,
        )
        logger.info(
            "Recorded pending payment %s for checkout %s", payment.pk, session.id
        )
        return payment, session.url

    def _expire_pending_checkouts(self, student, course: Course) -> None:
        """
        Close the open checkout sessions of a student for a course.

        A session Stripe reports as complete was paid while its webhook is
        still on the way; the new checkout is refused until it is settled.
        """
        pending = Payment.objects.filter(
            student=student, course=course, status=Payment.Status.PENDING
        )
        for payment in pending:
            if not self.gateway.expire_checkout_session(payment.external_checkout_id):
                logger.warning(
                    "Checkout %s of payment %s is already complete",
                    payment.external_checkout_id,
                    payment.pk,
                )
                raise AlreadyPaid(
                    details={"course_id": course.pk, "session_id": payment.external_checkout_id}
                )
            Payment.objects.filter(pk=payment.pk, status=Payment.Status.PENDING).update(
                status=Payment.Status.CANCELLED, updated_at=timezone.now()
            )
            logger.info("Cancelled superseded pending payment %s", payment.pk)

    # ---------- client verification ----------

    def verify_checkout(self, student, session_id: str) -> Dict[str, Any]:
        """
        Client-side confirmation after the redirect back from Stripe.

        Returns:
            ``{"verified": True, "status": ...}`` once settled, or
            ``{"verified": False, "status": "unpaid"}`` while Stripe has not
            collected the payment

        Raises:
            NotFound: If no payment references the session
            Forbidden: If the payment belongs to another student
            PaymentProviderError: If Stripe cannot be reached
        """
        payment = Payment.objects.filter(external_checkout_id=session_id).first()
        if payment is None:
            raise NotFound(details={"session_id": session_id})
        if payment.student_id != student.pk:
            raise Forbidden(details={"session_id": session_id})

        if not payment.awaits_settlement:
            return {
                "verified": payment.status != Payment.Status.CANCELLED,
                "status": payment.status,
            }

        session = self.gateway.retrieve_checkout_session(session_id)
        if not session["paid"]:
            return {"verified": False, "status": "unpaid"}

        payment, _ = self.reconcile_checkout_completed(
            session_id,
            customer_id=session["customer_id"],
            subscription_id=session["subscription_id"],
        )
        return {"verified": True, "status": payment.status}

    # ---------- reconciliation ----------

    def reconcile_checkout_completed(
        self,
        session_id: str,
        customer_id: Optional[str] = None,
        subscription_id: Optional[str] = None,
    ) -> Tuple[Payment, bool]:
        """
        Settle the payment of a completed checkout session.

        One-time payments become COMPLETED; installment payments become
        ACTIVE with the first installment paid. The student is enrolled, the
        module progress initialised and the affiliate conversion recorded,
        all in the same transaction and only on the first settlement.

        A superseded checkout (CANCELLED without any charge) that Stripe
        still reports as paid is settled as well, unless another payment
        already holds the course; that double charge is logged for refund.

        Returns:
            Tuple of (payment, changed); changed is False when the payment
            was already settled

        Raises:
            NotFound: If no payment references the session
        """
        cancel_subscription_id = None
        with transaction.atomic():
            payment = (
                Payment.objects.select_for_update()
                .select_related("course", "student")
                .filter(external_checkout_id=session_id)
                .first()
            )
            if payment is None:
                raise NotFound(details={"session_id": session_id})

            if not payment.awaits_settlement:
                logger.info("Payment %s already %s, nothing to do", payment.pk, payment.status)
                return payment, False

            duplicate = (
                Payment.objects.filter(
                    student_id=payment.student_id,
                    course_id=payment.course_id,
                    status__in=Payment.PAID_STATUSES,
                )
                .exclude(pk=payment.pk)
                .first()
            )
            if duplicate is not None:
                logger.error(
                    "Checkout %s paid although payment %s already covers course %s; refund required",
                    session_id,
                    duplicate.pk,
                    payment.course_id,
                )
                return payment, False

            payment.installments_paid = 1
            if customer_id:
                payment.external_customer_id = customer_id

            if payment.payment_type == Payment.PaymentType.ONE_TIME:
                payment.status = Payment.Status.COMPLETED
                payment.amount_paid = payment.amount_total
            else:
                if subscription_id:
                    payment.external_subscription_id = subscription_id
                payment.amount_paid = min(payment.installment_amount, payment.amount_total)
                if payment.installments_paid >= payment.installments_total:
                    payment.status = Payment.Status.COMPLETED
                    payment.amount_paid = payment.amount_total
                    cancel_subscription_id = payment.external_subscription_id
                else:
                    payment.status = Payment.Status.ACTIVE
            payment.save()

            self.enrollment.enroll(
                payment.student,
                payment.course,
                source=Enrollment.Source.PURCHASE,
                reference=session_id,
            )
            self.affiliates.attribute_conversion(payment)

            if cancel_subscription_id:
                transaction.on_commit(
                    partial(self.gateway.cancel_subscription, cancel_subscription_id)
                )

        logger.info(
            "Settled payment %s (%s): status=%s paid=%s/%s",
            payment.pk,
            payment.payment_type,
            payment.status,
            payment.amount_paid,
            payment.amount_total,
        )
        return payment, True

    def reconcile_installment_charge(self, subscription_id: str, billing_reason: Optional[str] = None) -> Tuple[Payment, bool]:
        """
        Book one paid installment invoice.

        The first invoice of a subscription is skipped because the checkout
        completion already booked it. On the last installment the payment
        becomes COMPLETED and the subscription is cancelled on Stripe after
        commit.

        Returns:
            Tuple of (payment, changed)

        Raises:
            NotFound: If no payment references the subscription
        """
        cancel = False
        with transaction.atomic():
            payment = (
                Payment.objects.select_for_update()
                .filter(external_subscription_id=subscription_id)
                .first()
            )
            if payment is None:
                raise NotFound(details={"subscription_id": subscription_id})

            if payment.payment_type != Payment.PaymentType.INSTALLMENT:
                return payment, False
            if billing_reason == FIRST_INVOICE_REASON or payment.installments_paid == 0:
                logger.info("Skipping first invoice of subscription %s", subscription_id)
                return payment, False
            if payment.status in (Payment.Status.COMPLETED, Payment.Status.CANCELLED):
                return payment, False
            if payment.installments_paid >= payment.installments_total:
                return payment, False

            payment.installments_paid += 1
            payment.amount_paid = min(
                payment.amount_paid + payment.installment_amount, payment.amount_total
            )
            if payment.installments_paid >= payment.installments_total:
                payment.status = Payment.Status.COMPLETED
                payment.amount_paid = payment.amount_total
                cancel = True
            elif payment.status == Payment.Status.PAST_DUE:
                payment.status = Payment.Status.ACTIVE
            payment.save()

            if cancel:
                transaction.on_commit(
                    partial(self.gateway.cancel_subscription, subscription_id)
                )

        logger.info(
            "Installment %s/%s paid for payment %s",
            payment.installments_paid,
            payment.installments_total,
            payment.pk,
        )
        return payment, True

    def reconcile_subscription_cancelled(self, subscription_id: str) -> Tuple[Payment, bool]:
        """
        Cancel the payment of a subscription that ended before full payment.

        Fully paid subscriptions are expected to be cancelled and keep
        their COMPLETED status.
        """
        return self._mark_unless_fully_paid(subscription_id, Payment.Status.CANCELLED)

    def reconcile_payment_failed(self, subscription_id: str) -> Tuple[Payment, bool]:
        """Mark the payment PAST_DUE when a recurring charge failed."""
        return self._mark_unless_fully_paid(subscription_id, Payment.Status.PAST_DUE)

    def _mark_unless_fully_paid(self, subscription_id: str, status: str) -> Tuple[Payment, bool]:
        with transaction.atomic():
            payment = (
                Payment.objects.select_for_update()
                .filter(external_subscription_id=subscription_id)
                .first()
            )
            if payment is None:
                raise NotFound(details={"subscription_id": subscription_id})

            if payment.is_fully_paid or payment.status in (
                Payment.Status.COMPLETED,
                Payment.Status.CANCELLED,
            ):
                return payment, False
            if payment.status == status:
                return payment, False

            payment.status = status
            payment.save(update_fields=["status", "updated_at"])

        logger.warning("Payment %s marked %s (subscription %s)", payment.pk, status, subscription_id)
        return payment, True

    # ---------- webhook dispatch ----------

    def handle_event(self, event: StripeEvent) -> None:
        """
        Apply a parsed webhook event to the ledger.

        De-duplication by event id happens in dj-stripe, which stores each
        event once; the reconcile methods are idempotent on top of that.

        Raises:
            NotFound: If the event references an unknown payment
        """
        with transaction.atomic():
            self._dispatch(event)

    def _dispatch(self, event: StripeEvent) -> None:
        if isinstance(event, CheckoutCompleted):
            if event.payment_status not in SETTLED_PAYMENT_STATUSES:
                logger.info(
                    "Checkout %s completed with payment_status=%s, waiting for the charge",
                    event.session_id,
                    event.payment_status,
                )
                return
            self.reconcile_checkout_completed(
                event.session_id,
                customer_id=event.customer_id,
                subscription_id=event.subscription_id,
            )
        elif isinstance(event, InvoicePaid):
            if not event.subscription_id:
                logger.info("Invoice %s has no subscription, ignoring", event.invoice_id)
                return
            self.reconcile_installment_charge(event.subscription_id, event.billing_reason)
        elif isinstance(event, SubscriptionCancelled):
            self.reconcile_subscription_cancelled(event.subscription_id)
        elif isinstance(event, InvoicePaymentFailed):
            if not event.subscription_id:
                logger.info("Invoice %s has no subscription, ignoring", event.invoice_id)
                return
            self.reconcile_payment_failed(event.subscription_id)
