"""
Certificate Services Package für DSP E-Learning Platform

Author: DSP Development Team
Version: 1.0.0
"""

from .certificate_service import CertificateService, generate_certificate_code

__all__ = ["CertificateService", "generate_certificate_code"]
