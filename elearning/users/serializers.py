"""
E-Learning User Management Serializers

This module provides serializers for user authentication, registration and
the student's own account data.

Serializers:
- CustomTokenObtainPairSerializer: JWT token with user metadata
- UserSerializer: User data including profile fields
- ExternalUserRegistrationSerializer: Self-service signup of students

Author: DSP Development Team
Version: 1.0.0
"""

from typing import Dict, Any
from django.contrib.auth.models import User
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from .models import Profile


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    JWT token serializer with user metadata.

    Token Payload Includes:
    - username: User identification
    - is_staff: Staff privileges flag
    """

    @classmethod
    def get_token(cls, user: User) -> RefreshToken:
        token = super().get_token(user)
        token['username'] = user.username
        token['is_staff'] = user.is_staff
        return token


class UserSerializer(serializers.ModelSerializer):
    """
    User data serializer for the student's own account.

    Profile fields are exposed read-only; they are maintained by the
    enrollment and affiliate services.
    """

    full_name = serializers.SerializerMethodField()
    referral_code = serializers.SerializerMethodField()
    enrolled_at = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = (
            'id', 'username', 'email', 'first_name', 'last_name', 'full_name',
            'is_staff', 'date_joined', 'last_login', 'referral_code', 'enrolled_at',
        )
        read_only_fields = fields

    def get_full_name(self, obj: User) -> str:
        """
        Get formatted full name of the user.

        Returns:
            Formatted full name or username if names are not available
        """
        return obj.get_full_name() or obj.username

    def get_referral_code(self, obj: User):
        profile = Profile.objects.filter(user=obj).first()
        return profile.referral_code if profile else None

    def get_enrolled_at(self, obj: User):
        profile = Profile.objects.filter(user=obj).first()
        return profile.enrolled_at if profile else None


class ExternalUserRegistrationSerializer(serializers.ModelSerializer):
    """
    Self-service registration of students.

    Validates username/email uniqueness and password strength, and requires
    a matching password confirmation.
    """

    password = serializers.CharField(
        write_only=True,
        required=True,
        min_length=8,
        style={'input_type': 'password'},
        help_text=_('Password must be at least 8 characters long')
    )

    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'},
        help_text=_('Enter the same password for confirmation')
    )

    class Meta:
        model = User
        fields = ('username', 'email', 'first_name', 'last_name', 'password', 'password_confirm')
        extra_kwargs = {'email': {'required': True}}

    def validate_email(self, value: str) -> str:
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError(
                _("A user with this email address already exists.")
            )
        return value

    def validate_password(self, value: str) -> str:
        """
        Validate password strength using Django validators.

        Raises:
            ValidationError: If password doesn't meet security requirements
        """
        try:
            validate_password(value)
        except DjangoValidationError as e:
            raise serializers.ValidationError(list(e.messages))
        return value

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if data.get('password') != data.get('password_confirm'):
            raise serializers.ValidationError({
                'password_confirm': _("The passwords do not match.")
            })
        return data

    def create(self, validated_data: Dict[str, Any]) -> User:
        validated_data.pop('password_confirm')
        password = validated_data.pop('password')
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user
