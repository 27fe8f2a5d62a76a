"""
E-Learning Certificate Views Package

Ausstellung von Zertifikaten und öffentliche Verifizierung per Code.

Author: DSP Development Team
Version: 1.0.0
"""

from .certificate_views import *
