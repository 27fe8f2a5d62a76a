"""
E-Learning Administration Models

Models:
- AuditLog: Append-only trail of staff actions on student data
- AdminNote: Internal staff note about a student

Author: DSP Development Team
Version: 1.0.0
"""

from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _


class AuditLog(models.Model):
    """
    Record of one staff action.

    Attributes:
        actor: Staff user who performed the action (kept if the user is deleted)
        action: Machine-readable action name, e.g. ``reset_progress``
        target_type: Kind of object acted on, e.g. ``user`` or ``affiliate``
        target_id: Primary key of the target as string
        details: Free-form context of the action
    """

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="audit_logs",
        verbose_name=_("Actor"),
    )
    action = models.CharField(max_length=64, db_index=True)
    target_type = models.CharField(max_length=64)
    target_id = models.CharField(max_length=64)
    details = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Audit Log Entry")
        verbose_name_plural = _("Audit Log")
        ordering = ["-created_at"]
        db_table = "elearning_audit_log"

    def __str__(self) -> str:
        return f"{self.action} {self.target_type}:{self.target_id} by {self.actor}"

    @classmethod
    def record(cls, actor, action: str, target_type: str, target_id, **details) -> "AuditLog":
        return cls.objects.create(
            actor=actor,
            action=action,
            target_type=target_type,
            target_id=str(target_id),
            details=details,
        )


class AdminNote(models.Model):
    """
    Internal note of a staff member about a student. Never shown to students.
    """

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="admin_notes",
        verbose_name=_("Student"),
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="authored_notes",
        verbose_name=_("Author"),
    )
    content = models.TextField(verbose_name=_("Content"))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Admin Note")
        verbose_name_plural = _("Admin Notes")
        ordering = ["-created_at", "-id"]
        db_table = "elearning_admin_note"

    def __str__(self) -> str:
        return f"Note on {self.student} by {self.author}"
