"""
URL configuration for the DSP Academy backend.

- /admin/: Django admin (Jazzmin)
- /api/elearning/: courses, lessons, live sessions, progression,
  certificates, affiliates, staff actions
- /api/payments/: Stripe checkout and config
- /api/payments/stripe/webhook/: Stripe webhook, served by dj-stripe
"""

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/elearning/', include('elearning.urls')),
    path('api/payments/', include('core.stripe_integration.urls')),
    path('api/payments/stripe/', include('djstripe.urls', namespace='djstripe')),
]
