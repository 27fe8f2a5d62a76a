"""
Stripe Integration AppConfig
============================

This module defines the Django application configuration for the local
`core.stripe_integration`. It is responsible for:

- Registering with Django (name, verbose label, default PK field).
- Configuring the Stripe SDK once per process (API key, timeout, retries).
- Importing the signal handlers at startup so that webhook-related
  logic (listening to `djstripe.models.Event` via `post_save`) is connected.

The app owns no models: the payment ledger lives in the `elearning` app and
is changed only through `reconciler.PaymentReconciler`.

Operational notes
-----------------
- Keep side effects in `ready()` minimal and idempotent.
- `apps.py` is executed on every process start; avoid DB/network calls here.

Author: DSP Development Team
Date: 2025-09-03
"""

from django.apps import AppConfig


class StripeIntegrationConfig(AppConfig):
    """
    App configuration for the `core.stripe_integration` package.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "core.stripe_integration"
    verbose_name = "Stripe Integration"

    def ready(self):
        from .gateway import configure_stripe

        configure_stripe()

        # Import signals so Django registers the post_save handler for dj-stripe Event
        from . import signals  # noqa: F401
