"""
Administration Services Package für DSP E-Learning Platform

Author: DSP Development Team
Version: 1.0.0
"""

from .admin_service import AdminActionService

__all__ = ["AdminActionService"]
