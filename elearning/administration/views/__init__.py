"""
E-Learning Administration Views Package

Staff-Endpunkte für Studenten-Support und das Partnerprogramm.

Author: DSP Development Team
Version: 1.0.0
"""

from .admin_views import *
