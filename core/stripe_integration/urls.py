from django.urls import path
from .views import (
    CreateCheckoutSessionView,
    GetStripeConfigView,
    VerifyCheckoutSessionView,
)

app_name = "stripe_integration"

# The webhook endpoint (stripe/webhook/) is served by dj-stripe, see backend/urls.py
urlpatterns = [
    path("stripe/config/", GetStripeConfigView.as_view(), name="stripe-config"),
    path("stripe/checkout-session/", CreateCheckoutSessionView.as_view(), name="stripe-checkout-session"),
    path("stripe/checkout-session/verify/", VerifyCheckoutSessionView.as_view(), name="stripe-checkout-verify"),
]
