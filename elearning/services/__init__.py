"""
E-Learning Services Package für DSP (Digital Solutions Platform)

Dieses Paket enthält alle Services für die E-Learning-Plattform:
- Progression Services (Modul-Freischaltung, Quiz-Bewertung, Meilensteine)
- Lesson Services (Lektionsfortschritt, Videofortschritt)
- Enrollment Services (Kurs-Einschreibung)
- Certificate Services (Zertifikatsausstellung)
- Affiliate Services (Partnerprogramm, Provisionen)
- Live Session Services (Live-Q&A, Anmeldungen, Fragen)
- Administration Services (Admin-Aktionen mit Audit-Log)

Struktur:
├── progression/           # Lernfortschritts-Engine
├── lessons/               # Lektionsfortschritt
├── enrollment/            # Einschreibungen
├── certificates/          # Zertifikate
├── affiliates/            # Partnerprogramm
├── live/                  # Live-Sitzungen
└── administration/        # Admin-Aktionen

Author: DSP Development Team
Version: 1.0.0
"""

# Progression Services
from .progression import ProgressionService, QuizSubmissionResult

# Lesson Services
from .lessons import LessonService

# Enrollment Services
from .enrollment import EnrollmentService

# Certificate Services
from .certificates import CertificateService

# Affiliate Services
from .affiliates import AffiliateService

# Live Session Services
from .live import LiveSessionService

# Administration Services
from .administration import AdminActionService

__all__ = [
    # Progression
    "ProgressionService",
    "QuizSubmissionResult",
    # Lessons
    "LessonService",
    # Enrollment
    "EnrollmentService",
    # Certificates
    "CertificateService",
    # Affiliates
    "AffiliateService",
    # Live sessions
    "LiveSessionService",
    # Administration
    "AdminActionService",
]
