"""
Stripe Webhook Signal Handlers (core.stripe_integration)
========================================================

dj-stripe receives the webhook, verifies its signature against
``DJSTRIPE_WEBHOOK_SECRET`` and stores it as a ``djstripe.models.Event``; a
redelivered event id is not stored twice. We react to the persisted row via
``post_save`` and hand the typed event to ``PaymentReconciler.handle_event``.

Handled event types: see ``events.PARSERS``.

Safety:
- Only the first save (created=True) is processed.
- Unsupported types, malformed payloads and events for unknown payments are
  logged and dropped; retrying them would not change the outcome.
- Database errors propagate so the delivery fails and Stripe retries it.

Author: DSP Development Team
Date: 2025-09-03
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from django.db import DatabaseError
from django.db.models.signals import post_save
from django.dispatch import receiver
from djstripe.models import Event

from elearning.exceptions import AcademyError

from .events import InvalidEventPayload, UnsupportedEvent, parse_event
from .reconciler import PaymentReconciler

logger = logging.getLogger(__name__)


def _event_payload(event: Event) -> Dict[str, Any]:
    """Rebuild the Stripe event shape that ``parse_event`` reads."""
    return {
        "id": event.id,
        "type": event.type,
        "livemode": bool(event.livemode),
        "data": event.data if isinstance(event.data, dict) else {},
    }


@receiver(post_save, sender=Event)
def _on_djstripe_event_saved(sender, instance: Event, created: bool, **kwargs):
    """
    Runs after dj-stripe has validated & stored the event.
    """
    if not created:
        return

    try:
        event = parse_event(_event_payload(instance))
    except UnsupportedEvent:
        logger.debug("Ignoring Stripe event type: %s (id=%s)", instance.type, instance.id)
        return
    except InvalidEventPayload as exc:
        logger.warning("Malformed Stripe event %s (id=%s): %s", instance.type, instance.id, exc)
        return

    try:
        PaymentReconciler().handle_event(event)
    except AcademyError as exc:
        logger.warning(
            "Stripe event %s (id=%s) not applied: %s %s",
            instance.type,
            instance.id,
            exc.default_code,
            getattr(exc, "details", {}),
        )
    except DatabaseError:
        logger.exception("Database error handling Stripe event %s (id=%s)", instance.type, instance.id)
        raise
    else:
        logger.info("Processed Stripe event %s (id=%s)", instance.type, instance.id)
