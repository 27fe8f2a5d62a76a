"""
E-Learning User Authentication Views

This module provides secure authentication endpoints for the E-Learning system,
including JWT token generation in HTTP-only cookies, logout and registration.

Views:
- CustomTokenObtainPairView: JWT authentication with cookie storage
- CustomTokenRefreshView: Cookie-based token refresh
- LogoutView: Token invalidation and logout
- ExternalUserRegistrationView: Self-service signup with referral binding
- CurrentUserView: The authenticated user's own data

Author: DSP Development Team
Version: 1.0.0
"""

import logging

from django.conf import settings
from django.utils.translation import gettext_lazy as _
from rest_framework import status, generics
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from ...services import AffiliateService
from ..serializers import (
    CustomTokenObtainPairSerializer,
    ExternalUserRegistrationSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


def _set_auth_cookies(response: Response, access: str = None, refresh: str = None) -> None:
    """
    Store JWT tokens in HTTP-only cookies.

    * httponly=True → prevents JavaScript access (mitigates XSS attacks)
    * secure=True → transmits cookies only over HTTPS
    * samesite="None" → required for cross-site requests from the frontend
    """
    if refresh:
        response.set_cookie(
            "refresh_token",
            refresh,
            httponly=True,
            secure=True,
            samesite="None",
            path="/",
            max_age=settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"],
        )
    if access:
        response.set_cookie(
            "access_token",
            access,
            httponly=True,
            secure=True,
            samesite="None",
            path="/",
            max_age=settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"],
        )


class CustomTokenObtainPairView(TokenObtainPairView):
    """
    Custom view extending SimpleJWT's TokenObtainPairView to store JWT tokens in secure HTTP-only cookies
    instead of returning them in the response body.
    """

    serializer_class = CustomTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        if response.status_code == 200:
            data = response.data
            refresh = data.pop("refresh", None)
            access = data.pop("access", None)
            _set_auth_cookies(response, access=access, refresh=refresh)
        return response


class CustomTokenRefreshView(APIView):
    """
    Refresh JWT tokens from the refresh cookie and store the new ones in
    secure HTTP-only cookies instead of returning them in the response body.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        refresh_token = request.COOKIES.get("refresh_token")
        if not refresh_token:
            return Response(
                {"detail": "Refresh token not provided"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        serializer = TokenRefreshSerializer(data={"refresh": refresh_token})
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        response = Response(status=status.HTTP_200_OK)
        _set_auth_cookies(response, access=data.get("access"), refresh=data.get("refresh"))
        return response


class LogoutView(APIView):
    """
    API endpoint to handle user logout by invalidating JWT tokens and clearing cookies.
    - Blacklists the refresh token from the cookie if it is still valid.
    - Always returns a 205 Reset Content response and deletes both cookies.
    """

    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.COOKIES.get("refresh_token")
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError:
                logger.info("Logout with an invalid or expired refresh token")
        response = Response(
            {"detail": _("Successfully logged out.")},
            status=status.HTTP_205_RESET_CONTENT,
        )
        response.delete_cookie("refresh_token")
        response.delete_cookie("access_token")
        return response


class ExternalUserRegistrationView(generics.CreateAPIView):
    """
    API endpoint for the self-service registration of students.

    If the visitor arrived through an affiliate link, the referral cookie is
    bound to the new profile so a later purchase is attributed.

    Request Body Example (JSON):
        {
            "username": "johndoe",
            "email": "johndoe@example.com",
            "first_name": "John",
            "last_name": "Doe",
            "password": "secret1234",
            "password_confirm": "secret1234"
        }
    """

    serializer_class = ExternalUserRegistrationSerializer
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        if serializer.is_valid():
            user = serializer.save()
            AffiliateService().bind_referral(
                user, request.COOKIES.get(settings.REFERRAL_COOKIE_NAME)
            )
            return Response(
                {"detail": _("Registration successful.")},
                status=status.HTTP_201_CREATED,
            )
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class CurrentUserView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)
