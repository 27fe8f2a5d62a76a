"""
E-Learning Lesson Views Package

Views zum Abschließen von Lektionen und zum Melden des Videofortschritts.

Author: DSP Development Team
Version: 1.0.0
"""

from .lesson_views import *
