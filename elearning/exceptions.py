"""
E-Learning Domain Exceptions

This module provides the exception classes raised by the payment, progression,
certificate and affiliate services. They follow a single hierarchy so callers
can catch ``AcademyError`` for any business-rule failure, and they subclass
DRF's ``APIException`` so views can let them propagate unchanged and the
framework renders them with the right status code.

Hierarchy:
- AcademyError
  - NotFound            (404) referenced entity absent
  - Forbidden           (403) caller does not own the resource
  - ModuleLocked        (403) quiz belongs to a module that is still locked
  - NotEligible         (400) certificate requirements not met
  - AlreadyPaid         (400) an active or completed payment already exists
  - PaymentProviderError (502) the payment provider could not be reached

Author: DSP Development Team
Version: 1.0.0
"""

from typing import Any, Dict, Optional

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException


class AcademyError(APIException):
    """
    Base exception for all business-rule failures of the academy backend.

    Attributes:
        detail: Human-readable message rendered by DRF
        details: Additional context for logging (never rendered)

    Example:
        >>> try:
        ...     certificate_service.grant_certificate(user, course)
        ... except AcademyError as e:
        ...     logger.warning("Certificate refused: %s", e.to_dict())
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("The request could not be processed.")
    default_code = "academy_error"

    def __init__(
        self,
        detail: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail=detail, code=code)
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for structured logging.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "detail": str(self.detail),
            "status_code": self.status_code,
            "code": self.default_code,
            "details": self.details,
            "exception_type": self.__class__.__name__,
        }


class NotFound(AcademyError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = _("The requested resource was not found.")
    default_code = "not_found"


class Forbidden(AcademyError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = _("You do not have access to this resource.")
    default_code = "forbidden"


class ModuleLocked(AcademyError):
    """Raised when a student touches a quiz whose module is not unlocked yet."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = _("This module is locked.")
    default_code = "module_locked"


class NotEligible(AcademyError):
    """Raised when a student requests a certificate before finishing the course."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Complete all modules and quizzes to earn the certificate.")
    default_code = "not_eligible"


class AlreadyPaid(AcademyError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("You already have access to this course.")
    default_code = "already_paid"


class PaymentProviderError(AcademyError):
    """
    Raised when an outbound call to the payment provider fails.

    The local state is never changed when this is raised from a client path.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = _("The payment provider is currently unavailable.")
    default_code = "payment_provider_error"
