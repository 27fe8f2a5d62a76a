"""
Live Session Services Package für DSP E-Learning Platform

Dieses Paket enthält die Live-Q&A-Funktionen für Schüler:
- Sitzungsübersicht (anstehend und vergangen)
- Anmeldung (RSVP)
- Fragen stellen und Fragen upvoten

Author: DSP Development Team
Version: 1.0.0
"""

from .live_session_service import PAST_SESSIONS_LIMIT, LiveSessionService

__all__ = [
    "PAST_SESSIONS_LIMIT",
    "LiveSessionService",
]
