"""
Stripe Integration Views (core.stripe_integration)
==================================================

This module exposes REST API endpoints for handling course payments with Stripe.

Endpoints
---------

1. CreateCheckoutSessionView
   - URL: /api/payments/stripe/checkout-session/
   - Method: POST
   - Body: {"course_id": 42, "payment_type": "one_time" | "installment"}
   - Auth: Required
   - Purpose:
       Creates a Stripe Checkout Session (one-time payment or monthly
       installment subscription) and records a PENDING payment. The
       referral cookie is bound to the student's profile on the way.

2. VerifyCheckoutSessionView
   - URL: /api/payments/stripe/checkout-session/verify/
   - Method: POST
   - Body: {"session_id": "cs_test_..."}
   - Auth: Required
   - Purpose:
       Called by the success page when the student returns before the
       webhook arrived. Settles the payment if Stripe reports it paid.

3. GetStripeConfigView
   - URL: /api/payments/stripe/config/
   - Method: GET
   - Auth: None
   - Purpose:
       Returns the correct publishable key so the frontend can
       initialize Stripe.js safely.

Stripe webhooks are received by dj-stripe (mounted in backend/urls.py) and
applied by signals.py.

Author: DSP Development Team
Date: 2025-08-21
"""

import logging

from django.conf import settings
from django.shortcuts import get_object_or_404
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from elearning.modules.models import Course
from elearning.payments.models import Payment

from .reconciler import PaymentReconciler

logger = logging.getLogger(__name__)


class CheckoutSessionSerializer(serializers.Serializer):
    course_id = serializers.IntegerField()
    payment_type = serializers.ChoiceField(
        choices=Payment.PaymentType.choices, default=Payment.PaymentType.ONE_TIME
    )


class VerifySessionSerializer(serializers.Serializer):
    session_id = serializers.CharField(max_length=255)


class CreateCheckoutSessionView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = CheckoutSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        course = get_object_or_404(
            Course, pk=serializer.validated_data["course_id"], is_published=True
        )
        payment, checkout_url = PaymentReconciler().create_checkout(
            request.user,
            course,
            serializer.validated_data["payment_type"],
            referral_code=request.COOKIES.get(settings.REFERRAL_COOKIE_NAME),
        )
        return Response(
            {
                "checkout_url": checkout_url,
                "id": payment.external_checkout_id,
                "payment_id": payment.pk,
            },
            status=status.HTTP_200_OK,
        )


class VerifyCheckoutSessionView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = VerifySessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = PaymentReconciler().verify_checkout(
            request.user, serializer.validated_data["session_id"]
        )
        logger.info("Checkout verification for user %s: %s", request.user.pk, result["status"])
        return Response(result, status=status.HTTP_200_OK)


class GetStripeConfigView(APIView):
    """
    endpoint so the frontend can initialize Stripe.js
    """
    permission_classes = [AllowAny]

    def get(self, request):
        publishable_key = (
            settings.STRIPE_LIVE_PUBLISHABLE_KEY
            if settings.STRIPE_LIVE_MODE
            else settings.STRIPE_TEST_PUBLISHABLE_KEY
        )
        return Response({"publishableKey": publishable_key}, status=200)
