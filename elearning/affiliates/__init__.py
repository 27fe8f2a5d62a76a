"""
E-Learning Affiliates Package - DSP (Digital Solutions Platform)

Dieses Paket enthält das Partnerprogramm des E-Learning-Systems.

Features:
- Referral-Links mit Klick-Tracking und 30-Tage-Cookie
- Provisionsberechnung bei abgeschlossenen Zahlungen
- Auszahlungen durch Administratoren

Struktur:
- models.py: Partner, Klicks, Konversionen und Auszahlungen
- serializers.py: API-Serialisierung
- views/: Partner- und Tracking-Views

Author: DSP Development Team
Version: 1.0.0
"""
