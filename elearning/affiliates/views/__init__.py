"""
E-Learning Affiliate Views Package

Views für das Partnerprogramm: Klick-Tracking, Bewerbung und Dashboard.

Author: DSP Development Team
Version: 1.0.0
"""

from .affiliate_views import *
