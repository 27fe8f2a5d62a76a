"""
Tests für die Stripe-Webhook-Verarbeitung und die Checkout-Endpunkte.

dj-stripe prüft die Signatur und speichert jedes Event als
``djstripe.models.Event``; die Tests legen diese Zeilen direkt an und
prüfen den ``post_save``-Handler.
"""

from types import SimpleNamespace
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from djstripe.models import Event
from rest_framework import status
from rest_framework.test import APIClient

from core.stripe_integration.reconciler import PaymentReconciler
from elearning.models import Enrollment, Payment

from ..helpers import create_course, create_user


def checkout_object(session_id="cs_test_1", payment_status="paid"):
    return {
        "id": session_id,
        "object": "checkout.session",
        "customer": "cus_1",
        "subscription": None,
        "payment_status": payment_status,
    }


def store_event(event_id, event_type, data_object):
    """Store an event the way dj-stripe does after verifying it."""
    return Event.objects.create(
        id=event_id,
        type=event_type,
        livemode=False,
        data={"object": data_object},
    )


class StripeEventSignalTests(TestCase):
    def setUp(self):
        self.student = create_user("student")
        self.course, _ = create_course(modules=2)
        self.payment = Payment.objects.create(
            student=self.student,
            course=self.course,
            external_checkout_id="cs_test_1",
            payment_type=Payment.PaymentType.ONE_TIME,
            amount_total=self.course.price,
        )

    def testGespeichertesEventSchliesstZahlungAb(self):
        store_event("evt_1", "checkout.session.completed", checkout_object())

        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.COMPLETED)
        self.assertEqual(self.payment.external_customer_id, "cus_1")
        self.assertTrue(Enrollment.objects.filter(student=self.student, course=self.course).exists())

    def testAktualisiertesEventWirdNichtErneutVerarbeitet(self):
        event = store_event("evt_1", "checkout.session.completed", checkout_object(payment_status="unpaid"))
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.PENDING)

        # dj-stripe aktualisiert die Zeile später (created=False)
        event.data = {"object": checkout_object()}
        event.save()

        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.PENDING)

    def testAsynchroneZahlungWirdNachtraeglichVerbucht(self):
        store_event("evt_1", "checkout.session.completed", checkout_object(payment_status="unpaid"))
        store_event("evt_2", "checkout.session.async_payment_succeeded", checkout_object())

        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.COMPLETED)

    def testNichtUnterstuetztesEventWirdIgnoriert(self):
        with mock.patch.object(PaymentReconciler, "handle_event") as handle_event:
            store_event("evt_9", "customer.created", {"id": "cus_1", "object": "customer"})
        handle_event.assert_not_called()

    def testUnvollstaendigesEventWirdProtokolliert(self):
        data_object = checkout_object()
        del data_object["id"]
        with self.assertLogs("core.stripe_integration.signals", level="WARNING"):
            store_event("evt_1", "checkout.session.completed", data_object)

        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.PENDING)

    def testUnbekannteZahlungWirdProtokolliert(self):
        with self.assertLogs("core.stripe_integration.signals", level="WARNING") as logs:
            store_event("evt_2", "checkout.session.completed", checkout_object(session_id="cs_unknown"))

        self.assertIn("not_found", logs.output[0])
        self.assertTrue(Event.objects.filter(id="evt_2").exists())
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.PENDING)

    def testDatenbankfehlerWirdWeitergereicht(self):
        with mock.patch.object(PaymentReconciler, "handle_event", side_effect=DatabaseError("down")):
            with self.assertRaises(DatabaseError):
                store_event("evt_1", "checkout.session.completed", checkout_object())


class CheckoutViewTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.student = create_user("student")
        self.course, _ = create_course(modules=2)

    @mock.patch("core.stripe_integration.reconciler.StripeGateway")
    def testCheckoutSessionErstellen(self, gateway_class):
        gateway_class.return_value.expire_checkout_session.return_value = True
        gateway_class.return_value.create_checkout_session.return_value = SimpleNamespace(
            id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1"
        )
        self.client.force_authenticate(self.student)

        response = self.client.post(
            "/api/payments/stripe/checkout-session/",
            {"course_id": self.course.pk, "payment_type": "installment"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["id"], "cs_test_1")
        self.assertEqual(Payment.objects.get().payment_type, Payment.PaymentType.INSTALLMENT)

    @mock.patch("core.stripe_integration.reconciler.StripeGateway")
    def testAbgeschlosseneAlteSessionLiefertAlreadyPaid(self, gateway_class):
        Payment.objects.create(
            student=self.student,
            course=self.course,
            external_checkout_id="cs_old",
            payment_type=Payment.PaymentType.ONE_TIME,
            amount_total=self.course.price,
        )
        gateway_class.return_value.expire_checkout_session.return_value = False
        self.client.force_authenticate(self.student)

        response = self.client.post(
            "/api/payments/stripe/checkout-session/", {"course_id": self.course.pk}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["detail"].code, "already_paid")
        gateway_class.return_value.create_checkout_session.assert_not_called()

    def testCheckoutOhneLogin(self):
        response = self.client.post(
            "/api/payments/stripe/checkout-session/", {"course_id": self.course.pk}, format="json"
        )
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def testVerifyUnbekannteSession(self):
        self.client.force_authenticate(self.student)
        response = self.client.post(
            "/api/payments/stripe/checkout-session/verify/", {"session_id": "cs_missing"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def testVerifyFremdeSession(self):
        Payment.objects.create(
            student=self.student,
            course=self.course,
            external_checkout_id="cs_test_1",
            payment_type=Payment.PaymentType.ONE_TIME,
            amount_total=self.course.price,
        )
        self.client.force_authenticate(create_user("other"))
        response = self.client.post(
            "/api/payments/stripe/checkout-session/verify/", {"session_id": "cs_test_1"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
