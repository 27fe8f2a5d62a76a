"""
Stripe Integration Package - DSP
=============================================================

This package centralizes all Stripe-related logic for the DSP backend
and serves as the **core integration point** for billing.

Current Scope
--------------------
- Creating Checkout Sessions for course purchases (one-time or installments)
- Client-side verification of returned checkout sessions
- Webhook handling for checkout completion, paid and failed invoices, and
  cancelled subscriptions (dj-stripe verifies and stores the events)
- Returning publishable config keys

Design Rationale
----------------
- Core placement: Located in `core/stripe_integration` so that billing
  is not tied only to e-learning.
- Typed events: webhook JSON is parsed into dataclasses (see events.py)
  before it reaches the reconciler; unknown types are rejected explicitly.
- One owner: every Payment change goes through reconciler.py.

Structure
---------
- __init__.py (this file, documentation)
- apps.py         → App configuration (`StripeIntegrationConfig`)
- gateway.py      → Outbound Stripe calls (timeout, retries, error mapping)
- events.py       → Webhook event parsing
- reconciler.py   → Payment state machine, enrollment and attribution
- signals.py      → post_save handler for dj-stripe `Event` rows
- views.py        → API endpoints (Checkout, Verify, Config)
- urls.py         → Routes for Stripe endpoints

Author: DSP Development Team
Date: 2025-09-03
"""
