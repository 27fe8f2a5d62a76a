"""
Enrollment Services Package für DSP E-Learning Platform

Author: DSP Development Team
Version: 1.0.0
"""

from .enrollment_service import EnrollmentService

__all__ = ["EnrollmentService"]
