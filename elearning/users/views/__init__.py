"""
E-Learning Users Views Package - DSP (Digital Solutions Platform)

Dieses Paket enthält alle Views für die Benutzerverwaltung im E-Learning-System.
Ermöglicht Authentifizierung, Registrierung und Abruf der eigenen Benutzerdaten.

Features:
- JWT-basierte Authentifizierung mit HTTP-only Cookies
- Registrierung mit Übernahme des Referral-Cookies
- Logout-Funktionalität mit Token-Invalidierung

Author: DSP Development Team
Created: 10.07.2025
Version: 1.0.0
"""

from .auth_views import (
    CustomTokenObtainPairView,
    CustomTokenRefreshView,
    LogoutView,
    ExternalUserRegistrationView,
    CurrentUserView,
)
