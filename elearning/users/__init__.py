"""
E-Learning Users Package - DSP (Digital Solutions Platform)

Dieses Paket enthält alle Module für die Benutzerverwaltung im E-Learning-System.
Ermöglicht erweiterte Benutzerprofile, Authentifizierung und Registrierung.

Features:
- Benutzerprofile mit Referral-Code und Aktivitätszeitpunkten
- JWT-basierte Authentifizierung mit HTTP-only Cookies
- Automatische Profilerstellung durch Django-Signale

Struktur:
- models.py: Benutzerprofile und Signal-Handler
- serializers.py: API-Serialisierung für Benutzerdaten
- views/: Authentifizierungs-Views

Author: DSP Development Team
Created: 10.07.2025
Version: 1.0.0
"""
