"""
E-Learning Affiliate Views

- AffiliateTrackView: referral link target, records the click and sets the cookie
- AffiliateApplyView: become an affiliate
- AffiliateDashboardView: the affiliate's own numbers

Author: DSP Development Team
Version: 1.0.0
"""

import logging

from django.conf import settings
from django.shortcuts import redirect
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from ...services import AffiliateService
from ..serializers import AffiliateSerializer, AffiliateStatsSerializer

logger = logging.getLogger(__name__)


def get_client_ip(request):
    forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


class AffiliateTrackView(APIView):
    """
    Target of referral links (``?ref=CODE``).

    Records the click for approved affiliates, stores the code in an
    httponly cookie and redirects the visitor to the enroll page.
    """

    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        code = (request.query_params.get("ref") or "").strip()
        frontend_url = settings.FRONTEND_URL.rstrip("/")
        if not code:
            return redirect(f"{frontend_url}/")

        AffiliateService().track_click(
            code,
            ip_address=get_client_ip(request),
            user_agent=request.META.get("HTTP_USER_AGENT", ""),
        )
        response = redirect(f"{frontend_url}/enroll")
        response.set_cookie(
            settings.REFERRAL_COOKIE_NAME,
            code,
            max_age=settings.REFERRAL_COOKIE_MAX_AGE,
            httponly=True,
            samesite="Lax",
            path="/",
        )
        return response


class AffiliateApplyView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        affiliate, created = AffiliateService().apply_for_affiliate(request.user)
        return Response(
            AffiliateSerializer(affiliate, context={"request": request}).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class AffiliateDashboardView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        stats = AffiliateService().affiliate_stats(request.user)
        if stats is None:
            return Response(
                {"detail": "You are not registered as an affiliate."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(AffiliateStatsSerializer(stats, context={"request": request}).data)
