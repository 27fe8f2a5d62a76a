"""
Progression Services Package für DSP E-Learning Platform

Dieses Paket enthält die Lernfortschritts-Engine:
- Initialisierung der Modul-Sperrzustände
- Quiz-Bewertung und Freischaltung des nächsten Moduls
- Meilenstein-Auswertung

Author: DSP Development Team
Version: 1.0.0
"""

from .progression_service import (
    ProgressionService,
    QuizSubmissionResult,
    calculate_score,
    grade_answers,
)

__all__ = [
    "ProgressionService",
    "QuizSubmissionResult",
    "calculate_score",
    "grade_answers",
]
