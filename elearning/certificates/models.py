"""
E-Learning Certificate Models

Models:
- Certificate: Course completion certificate, issued at most once per
  (student, course) and identified by a globally unique code

Author: DSP Development Team
Version: 1.0.0
"""

from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _

from ..modules.models import Course


class Certificate(models.Model):
    """
    Course completion certificate.

    Attributes:
        student: Certificate holder
        course: Completed course
        certificate_code: Public verification code (e.g. ``CERT-7Q2M9XKA``)
        issued_by_admin: True if staff issued it without the eligibility check
        issued_at: Issue timestamp
    """

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="certificates",
        verbose_name=_("Student"),
    )

    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="certificates",
        verbose_name=_("Course"),
    )

    certificate_code = models.CharField(
        max_length=32,
        unique=True,
        verbose_name=_("Certificate Code"),
        help_text=_("Public code used to verify the certificate"),
    )

    issued_by_admin = models.BooleanField(
        default=False,
        verbose_name=_("Issued by Admin"),
        help_text=_("Issued by staff without the eligibility check"),
    )

    issued_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Certificate")
        verbose_name_plural = _("Certificates")
        ordering = ["-issued_at"]
        db_table = "elearning_certificate"
        constraints = [
            models.UniqueConstraint(
                fields=["student", "course"], name="unique_certificate_per_course"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.certificate_code} ({self.student} - {self.course})"
