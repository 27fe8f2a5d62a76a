"""
E-Learning Quiz Views Package

Views zum Abrufen und Einreichen von Modul-Quizzen.

Author: DSP Development Team
Version: 1.0.0
"""

from .quiz_views import *
