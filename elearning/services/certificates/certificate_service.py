"""
Certificate Service für DSP E-Learning Platform

Service for issuing and verifying course completion certificates.

Rules:
- At most one certificate per (student, course); a second request returns
  the existing certificate
- Self-service issuance requires every required module to be completed and
  every required module's quiz to be passed at least once
- Staff issuance skips the eligibility check

Author: DSP Development Team
Version: 1.0.0
"""

import logging
import secrets
import string
from typing import Tuple

from django.conf import settings
from django.db import IntegrityError, transaction

from ...certificates.models import Certificate
from ...exceptions import NotEligible, NotFound
from ...modules.models import Course, ModuleProgress
from ...quizzes.models import Quiz, QuizAttempt

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 8


def generate_certificate_code() -> str:
    """
    Generate a public certificate code such as ``CERT-7Q2M9XKA``.

    Collisions are negligible at this length and are not checked; the
    unique constraint on the code rejects one if it ever happens.
    """
    suffix = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
    return f"{settings.CERTIFICATE_CODE_PREFIX}-{suffix}"


class CertificateService:
    """
    Service für Zertifikate.
    """

    def __init__(self):
        self.logger = logger

    def is_eligible(self, student, course: Course) -> bool:
        """
        Check whether a student finished every requirement of a course.

        Args:
            student: User to check
            course: Course to check

        Returns:
            True if all required modules are completed and all of their
            quizzes were passed at least once
        """
        required_ids = list(course.required_modules().values_list("id", flat=True))
        completed = ModuleProgress.objects.filter(
            student=student,
            module_id__in=required_ids,
            status=ModuleProgress.Status.COMPLETED,
        ).count()
        if completed < len(required_ids):
            return False

        quiz_ids = set(
            Quiz.objects.filter(module_id__in=required_ids).values_list("id", flat=True)
        )
        passed_quiz_ids = set(
            QuizAttempt.objects.filter(
                student=student, quiz_id__in=quiz_ids, passed=True
            ).values_list("quiz_id", flat=True)
        )
        return quiz_ids <= passed_quiz_ids

    def grant_certificate(self, student, course: Course, override: bool = False) -> Tuple[Certificate, bool]:
        """
        Issue the certificate of a course, at most once per student.

        Args:
            student: Certificate holder
            course: Completed course
            override: Staff path; skips the eligibility check

        Returns:
            Tuple of (certificate, created)

        Raises:
            NotEligible: If the self-service path finds open requirements
        """
        existing = Certificate.objects.filter(student=student, course=course).first()
        if existing is not None:
            return existing, False

        if not override and not self.is_eligible(student, course):
            raise NotEligible(details={"user_id": student.pk, "course_id": course.pk})

        try:
            with transaction.atomic():
                certificate = Certificate.objects.create(
                    student=student,
                    course=course,
                    certificate_code=generate_certificate_code(),
                    issued_by_admin=override,
                )
        except IntegrityError:
            # A concurrent request issued it first.
            existing = Certificate.objects.filter(student=student, course=course).first()
            if existing is None:
                raise
            return existing, False

        self.logger.info(
            "Issued certificate %s to user %s for course %s (override=%s)",
            certificate.certificate_code,
            student.pk,
            course.pk,
            override,
        )
        return certificate, True

    def verify_certificate(self, code: str) -> Certificate:
        """
        Look up a certificate by its public code.

        Raises:
            NotFound: If no certificate carries the code
        """
        certificate = (
            Certificate.objects.select_related("student", "course")
            .filter(certificate_code=code)
            .first()
        )
        if certificate is None:
            raise NotFound(details={"certificate_code": code})
        return certificate
