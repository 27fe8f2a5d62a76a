"""
Tests für das Stripe-Gateway und das Parsen der Webhook-Events.

Das Stripe-SDK wird gepatcht; es findet kein Netzwerkzugriff statt.
"""

from types import SimpleNamespace
from unittest import mock

import stripe
from django.test import SimpleTestCase, override_settings

from core.stripe_integration.events import (
    CheckoutCompleted,
    InvalidEventPayload,
    UnsupportedEvent,
    parse_event,
)
from core.stripe_integration.gateway import StripeGateway, configure_stripe
from elearning.exceptions import PaymentProviderError


@mock.patch("core.stripe_integration.gateway.stripe.checkout.Session")
class ExpireCheckoutSessionTests(SimpleTestCase):
    def testOffeneSessionWirdBeendet(self, session_api):
        session_api.retrieve.return_value = SimpleNamespace(status="open")

        self.assertTrue(StripeGateway().expire_checkout_session("cs_A"))
        session_api.expire.assert_called_once_with("cs_A")

    def testAbgeschlosseneSessionWirdGemeldet(self, session_api):
        session_api.retrieve.return_value = SimpleNamespace(status="complete")

        self.assertFalse(StripeGateway().expire_checkout_session("cs_A"))
        session_api.expire.assert_not_called()

    def testAbgelaufeneSessionBrauchtKeinenAufruf(self, session_api):
        session_api.retrieve.return_value = SimpleNamespace(status="expired")

        self.assertTrue(StripeGateway().expire_checkout_session("cs_A"))
        session_api.expire.assert_not_called()

    def testStripeFehler(self, session_api):
        session_api.retrieve.side_effect = stripe.APIConnectionError("offline")

        with self.assertRaises(PaymentProviderError):
            StripeGateway().expire_checkout_session("cs_A")


class ConfigureStripeTests(SimpleTestCase):
    @override_settings(STRIPE_SECRET_KEY="sk_test_config", STRIPE_MAX_NETWORK_RETRIES=4)
    def testSdkWirdKonfiguriert(self):
        with mock.patch.object(stripe, "api_key", None), mock.patch.object(
            stripe, "max_network_retries", 0
        ), mock.patch.object(stripe, "default_http_client", None):
            configure_stripe()
            self.assertEqual(stripe.api_key, "sk_test_config")
            self.assertEqual(stripe.max_network_retries, 4)
            self.assertIsInstance(stripe.default_http_client, stripe.RequestsClient)


class ParseEventTests(SimpleTestCase):
    def event(self, event_type, **obj):
        return {"id": "evt_1", "type": event_type, "livemode": False, "data": {"object": obj}}

    def testAsynchroneZahlungIstCheckoutAbschluss(self):
        event = parse_event(
            self.event(
                "checkout.session.async_payment_succeeded",
                id="cs_A",
                customer={"id": "cus_1"},
                payment_status="paid",
            )
        )
        self.assertIsInstance(event, CheckoutCompleted)
        self.assertEqual(event.session_id, "cs_A")
        self.assertEqual(event.customer_id, "cus_1")
        self.assertEqual(event.payment_status, "paid")

    def testNichtUnterstuetzterTyp(self):
        with self.assertRaises(UnsupportedEvent):
            parse_event(self.event("customer.created", id="cus_1"))

    def testFehlendesObjekt(self):
        with self.assertRaises(InvalidEventPayload):
            parse_event({"id": "evt_1", "type": "invoice.paid", "data": {}})
