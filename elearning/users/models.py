"""
E-Learning User Management Models

This module defines the user-related models for the E-Learning system,
extending Django's built-in User model with additional profile functionality
and automatic profile management through Django signals.

Models:
- Profile: Extended user information (referral binding, activity tracking)

Features:
- Automatic profile creation for new users
- Referral code binding used for affiliate attribution at purchase time
- Enrollment and last activity timestamps for the admin console

Author: DSP Development Team
Version: 1.0.0
"""

from django.db import models
from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Profile(models.Model):
    """
    Extended user profile model for the E-Learning system.

    Attributes:
        user: One-to-one relationship with Django User model
        referral_code: Affiliate code captured from the referral cookie
        enrolled_at: First time the student got access to a paid course
        last_activity_at: Last quiz submission or progress change

    The referral code is written once (first referral wins) and is read by
    the payment reconciler when a purchase completes.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        verbose_name=_("User"),
        help_text=_("Associated user account"),
    )

    referral_code = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_("Referral Code"),
        help_text=_("Affiliate code that referred this user (first referral wins)"),
    )

    enrolled_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Enrolled At"),
        help_text=_("When the user was first enrolled in a paid course"),
    )

    last_activity_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Last Activity"),
        help_text=_("Last learning activity of the user"),
    )

    class Meta:
        verbose_name = _("User Profile")
        verbose_name_plural = _("User Profiles")
        db_table = "elearning_profile"

    def __str__(self) -> str:
        return f"{self.user.username} Profile"

    def __repr__(self) -> str:
        return f"<Profile(user={self.user.username}, referral_code={self.referral_code})>"

    def bind_referral_code(self, code: str) -> bool:
        """
        Store a referral code if the profile does not carry one yet.

        Args:
            code: Affiliate code read from the referral cookie

        Returns:
            True if the code was stored, False if a code was already bound
        """
        if self.referral_code or not code:
            return False
        self.referral_code = code
        self.save(update_fields=["referral_code"])
        return True

    def touch_activity(self) -> None:
        """Update the last activity timestamp."""
        self.last_activity_at = timezone.now()
        self.save(update_fields=["last_activity_at"])


# --- Signal Handlers for Automatic Profile Management ---


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_profile(sender, instance, created: bool, **kwargs) -> None:
    """
    Automatically create a user profile when a new user is created.

    Args:
        sender: The User model class
        instance: The actual User instance that was saved
        created: Boolean indicating if this is a new instance
        **kwargs: Additional signal arguments
    """
    if created:
        Profile.objects.get_or_create(user=instance)
