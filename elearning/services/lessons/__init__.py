"""
Lesson Services Package für DSP E-Learning Platform

Dieses Paket enthält den Lektionsfortschritt:
- Lektionen als abgeschlossen markieren
- Videofortschritt speichern (Abschluss ab 90 %)

Author: DSP Development Team
Version: 1.0.0
"""

from .lesson_service import AUTO_COMPLETE_PERCENT, LessonService

__all__ = [
    "AUTO_COMPLETE_PERCENT",
    "LessonService",
]
