"""
E-Learning Live Session Views Package

Views für Live-Sitzungen: Übersicht, Details, Anmeldung, Fragen und Upvotes.

Author: DSP Development Team
Version: 1.0.0
"""

from .live_views import *
