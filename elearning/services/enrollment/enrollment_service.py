"""
Enrollment Service für DSP E-Learning Platform

Grants a student access to a course and prepares the module progress rows.
Used by the payment reconciler when a checkout settles and by staff.

Safety:
- Enrollment is idempotent via ``get_or_create``
- Progress initialisation never clobbers existing rows

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone

from ...modules.models import Course, Enrollment
from ...users.models import Profile
from ..progression import ProgressionService

logger = logging.getLogger(__name__)


class EnrollmentService:
    """
    Service für Kurs-Einschreibungen.
    """

    def __init__(self, progression: Optional[ProgressionService] = None):
        self.logger = logger
        self.progression = progression or ProgressionService()

    def enroll(self, student, course: Course, *, source: str = Enrollment.Source.PURCHASE, reference: Optional[str] = None) -> bool:
        """
        Idempotently enroll a student into a course.

        Args:
            student: Django user instance
            course: Course instance
            source: Origin of the enrollment (purchase or admin)
            reference: External reference, e.g. the checkout session id

        Returns:
            True if a new enrollment was created, False if it already existed
        """
        with transaction.atomic():
            _, created = Enrollment.objects.get_or_create(
                student=student,
                course=course,
                defaults={"source": source, "reference": reference or ""},
            )
            Profile.objects.filter(user=student, enrolled_at__isnull=True).update(
                enrolled_at=timezone.now()
            )
            self.progression.initialize_module_progress(student, course)

        if created:
            self.logger.info(
                "Enrolled user %s into course %s (source=%s, ref=%s).",
                student.pk,
                course.pk,
                source,
                reference,
            )
        else:
            self.logger.info(
                "Enrollment already exists for user %s and course %s.",
                student.pk,
                course.pk,
            )
        return created

    def is_enrolled(self, student, course: Course) -> bool:
        return Enrollment.objects.filter(student=student, course=course).exists()
