"""
Stripe Webhook Event Parsing (core.stripe_integration)
======================================================

Turns a verified Stripe event into one of four typed payloads. The
reconciler only ever sees these dataclasses, never the raw JSON.

Consumed event types
--------------------
- ``checkout.session.completed``     -> CheckoutCompleted
- ``checkout.session.async_payment_succeeded`` -> CheckoutCompleted
- ``invoice.paid``                   -> InvoicePaid
- ``customer.subscription.deleted``  -> SubscriptionCancelled
- ``invoice.payment_failed``         -> InvoicePaymentFailed

Any other type raises ``UnsupportedEvent``; a consumed type whose payload
lacks the fields we need raises ``InvalidEventPayload``.

Author: DSP Development Team
Date: 2025-09-03
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Union


class UnsupportedEvent(Exception):
    """The event type is not one the reconciler consumes."""

    def __init__(self, event_type: str) -> None:
        self.event_type = event_type
        super().__init__(f"Unsupported Stripe event type: {event_type}")


class InvalidEventPayload(Exception):
    """A consumed event type arrived without the fields it must carry."""


@dataclass(frozen=True)
class CheckoutCompleted:
    event_type: ClassVar[str] = "checkout.session.completed"

    event_id: str
    session_id: str
    customer_id: Optional[str]
    subscription_id: Optional[str]
    payment_status: Optional[str]
    livemode: bool = False


@dataclass(frozen=True)
class InvoicePaid:
    event_type: ClassVar[str] = "invoice.paid"

    event_id: str
    invoice_id: str
    subscription_id: Optional[str]
    billing_reason: Optional[str]
    livemode: bool = False


@dataclass(frozen=True)
class SubscriptionCancelled:
    event_type: ClassVar[str] = "customer.subscription.deleted"

    event_id: str
    subscription_id: str
    livemode: bool = False


@dataclass(frozen=True)
class InvoicePaymentFailed:
    event_type: ClassVar[str] = "invoice.payment_failed"

    event_id: str
    invoice_id: str
    subscription_id: Optional[str]
    livemode: bool = False


StripeEvent = Union[
    CheckoutCompleted, InvoicePaid, SubscriptionCancelled, InvoicePaymentFailed
]


# ---------- helpers ----------


def _object_id(value: Any) -> Optional[str]:
    """
    Read an id from a field that Stripe returns either as a string or as an
    expanded object.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, Mapping):
        obj_id = value.get("id")
        return obj_id if isinstance(obj_id, str) and obj_id else None
    return None


def _require_str(obj: Mapping[str, Any], key: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidEventPayload(f"Missing '{key}' in event object")
    return value


def _invoice_subscription_id(invoice: Mapping[str, Any]) -> Optional[str]:
    """
    Subscription id of an invoice.

    Older API versions carry it on ``invoice.subscription``; newer ones
    moved it to ``invoice.parent.subscription_details.subscription``.
    """
    subscription_id = _object_id(invoice.get("subscription"))
    if subscription_id:
        return subscription_id
    parent = invoice.get("parent")
    if isinstance(parent, Mapping):
        details = parent.get("subscription_details")
        if isinstance(details, Mapping):
            return _object_id(details.get("subscription"))
    return None


def _checkout_completed(event_id: str, obj: Mapping[str, Any], livemode: bool) -> CheckoutCompleted:
    return CheckoutCompleted(
        event_id=event_id,
        session_id=_require_str(obj, "id"),
        customer_id=_object_id(obj.get("customer")),
        subscription_id=_object_id(obj.get("subscription")),
        payment_status=obj.get("payment_status"),
        livemode=livemode,
    )


def _invoice_paid(event_id: str, obj: Mapping[str, Any], livemode: bool) -> InvoicePaid:
    return InvoicePaid(
        event_id=event_id,
        invoice_id=_require_str(obj, "id"),
        subscription_id=_invoice_subscription_id(obj),
        billing_reason=obj.get("billing_reason"),
        livemode=livemode,
    )


def _subscription_cancelled(event_id: str, obj: Mapping[str, Any], livemode: bool) -> SubscriptionCancelled:
    return SubscriptionCancelled(
        event_id=event_id,
        subscription_id=_require_str(obj, "id"),
        livemode=livemode,
    )


def _invoice_payment_failed(event_id: str, obj: Mapping[str, Any], livemode: bool) -> InvoicePaymentFailed:
    return InvoicePaymentFailed(
        event_id=event_id,
        invoice_id=_require_str(obj, "id"),
        subscription_id=_invoice_subscription_id(obj),
        livemode=livemode,
    )


PARSERS: Dict[str, Callable[[str, Mapping[str, Any], bool], StripeEvent]] = {
    "checkout.session.completed": _checkout_completed,
    # Delayed payment methods complete the session unpaid and settle later
    "checkout.session.async_payment_succeeded": _checkout_completed,
    "invoice.paid": _invoice_paid,
    "customer.subscription.deleted": _subscription_cancelled,
    "invoice.payment_failed": _invoice_payment_failed,
}


def parse_event(event: Mapping[str, Any]) -> StripeEvent:
    """
    Convert a verified Stripe event into its typed payload.

    Args:
        event: Event decoded from a verified webhook body

    Returns:
        One of CheckoutCompleted, InvoicePaid, SubscriptionCancelled,
        InvoicePaymentFailed

    Raises:
        UnsupportedEvent: For event types without an entry in PARSERS
        InvalidEventPayload: If the event object is missing required fields
    """
    if not isinstance(event, Mapping):
        raise InvalidEventPayload("Event is not an object")

    event_type = event.get("type")
    parser = PARSERS.get(event_type)
    if parser is None:
        raise UnsupportedEvent(str(event_type))

    event_id = event.get("id")
    if not isinstance(event_id, str) or not event_id:
        raise InvalidEventPayload("Missing event id")

    data = event.get("data")
    obj = data.get("object") if isinstance(data, Mapping) else None
    if not isinstance(obj, Mapping):
        raise InvalidEventPayload("Missing data.object")

    return parser(event_id, obj, bool(event.get("livemode", False)))
