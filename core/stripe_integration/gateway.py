"""
Stripe Gateway (core.stripe_integration)
========================================

Thin wrapper around the official ``stripe`` SDK. Every outbound call of the
backend goes through here so that:

- the SDK is configured once at startup (`configure_stripe`, called from
  `StripeIntegrationConfig.ready()`: API key, request timeout, network retries)
- SDK errors surface as ``PaymentProviderError`` (HTTP 502)
- tests can replace a single object instead of patching the SDK

Outbound calls
--------------
- create_checkout_session   (one-time payment or monthly installment subscription)
- retrieve_checkout_session (client-side verification)
- expire_checkout_session   (superseded checkout of the same course)
- cancel_subscription       (after the last installment was paid)

Inbound webhooks do not pass through here: dj-stripe verifies and stores
them (see signals.py).

Author: DSP Development Team
Date: 2025-09-03
"""

import logging
from typing import Any, Dict, Optional

import stripe
from django.conf import settings

from elearning.exceptions import PaymentProviderError

logger = logging.getLogger(__name__)

COMPLETE = "complete"
EXPIRED = "expired"


def configure_stripe() -> None:
    """Apply key, timeout and retry settings to the Stripe SDK."""
    stripe.api_key = settings.STRIPE_SECRET_KEY
    stripe.max_network_retries = settings.STRIPE_MAX_NETWORK_RETRIES
    stripe.default_http_client = stripe.RequestsClient(timeout=settings.STRIPE_API_TIMEOUT)


def _object_id(value: Any) -> Optional[str]:
    """Id of a field Stripe returns either as string or as expanded object."""
    if value is None or isinstance(value, str):
        return value or None
    return getattr(value, "id", None)


class StripeGateway:
    """
    Outbound access to Stripe.
    """

    def create_checkout_session(
        self,
        *,
        course,
        student,
        payment_type: str,
        unit_amount: int,
        success_url: str,
        cancel_url: str,
    ) -> Any:
        """
        Create a Stripe Checkout Session for a course purchase.

        One-time purchases use ``mode="payment"`` with the full price;
        installment plans use ``mode="subscription"`` with a monthly price of
        one installment.

        Args:
            course: Course being purchased
            student: Purchasing user
            payment_type: ``one_time`` or ``installment``
            unit_amount: Amount charged per charge in minor units

        Returns:
            The Stripe Checkout Session (``id`` and ``url`` are used)

        Raises:
            PaymentProviderError: If Stripe rejects or cannot be reached
        """
        metadata = {
            "user_id": str(student.pk),
            "course_id": str(course.pk),
            "payment_type": payment_type,
        }
        price_data: Dict[str, Any] = {
            "currency": course.currency,
            "product_data": {"name": course.title},
            "unit_amount": unit_amount,
        }
        params: Dict[str, Any] = dict(
            line_items=[{"price_data": price_data, "quantity": 1}],
            success_url=success_url,
            cancel_url=cancel_url,
            metadata=metadata,
        )
        if student.email:
            params["customer_email"] = student.email

        if payment_type == "installment":
            price_data["recurring"] = {"interval": "month"}
            params["mode"] = "subscription"
            params["subscription_data"] = {"metadata": metadata}
        else:
            params["mode"] = "payment"

        try:
            session = stripe.checkout.Session.create(**params)
        except stripe.StripeError as e:
            logger.error("Stripe checkout creation failed for course %s: %s", course.pk, e)
            raise PaymentProviderError(details={"stripe_error": getattr(e, "user_message", None) or str(e)})

        logger.info(
            "Created Stripe checkout %s (%s) for user %s, course %s",
            session.id,
            payment_type,
            student.pk,
            course.pk,
        )
        return session

    def retrieve_checkout_session(self, session_id: str) -> Dict[str, Any]:
        """
        Fetch the settlement state of a Checkout Session.

        Returns:
            Dict with ``paid`` flag plus ``customer_id`` and ``subscription_id``

        Raises:
            PaymentProviderError: If Stripe cannot be reached
        """
        try:
            session = stripe.checkout.Session.retrieve(session_id)
        except stripe.StripeError as e:
            logger.error("Stripe session retrieval failed for %s: %s", session_id, e)
            raise PaymentProviderError(details={"session_id": session_id})

        payment_status = getattr(session, "payment_status", None)
        return {
            "paid": payment_status in ("paid", "no_payment_required"),
            "payment_status": payment_status,
            "customer_id": _object_id(getattr(session, "customer", None)),
            "subscription_id": _object_id(getattr(session, "subscription", None)),
        }

    def expire_checkout_session(self, session_id: str) -> bool:
        """
        Close an open Checkout Session so it can no longer be paid.

        Returns:
            True if the session is expired now (or was already), False if
            the student completed it in the meantime

        Raises:
            PaymentProviderError: If Stripe cannot be reached
        """
        try:
            session = stripe.checkout.Session.retrieve(session_id)
            session_status = getattr(session, "status", None)
            if session_status == COMPLETE:
                return False
            if session_status != EXPIRED:
                stripe.checkout.Session.expire(session_id)
        except stripe.StripeError as e:
            logger.error("Stripe session expiry failed for %s: %s", session_id, e)
            raise PaymentProviderError(details={"session_id": session_id})

        logger.info("Expired superseded checkout %s", session_id)
        return True

    def cancel_subscription(self, subscription_id: str) -> bool:
        """
        Cancel a subscription on Stripe, best effort.

        Failures are logged and reported as False; the caller's local state
        change stays committed.
        """
        try:
            stripe.Subscription.cancel(subscription_id)
        except stripe.StripeError:
            logger.exception("Failed to cancel completed subscription %s", subscription_id)
            return False
        logger.info("Cancelled fully paid subscription %s", subscription_id)
        return True

