"""
E-Learning Live Sessions Package - DSP (Digital Solutions Platform)

Dieses Paket enthält die Live-Q&A-Sitzungen der Akademie.

Features:
- Geplante Live-Sitzungen mit Teilnahme-Link und Aufzeichnung
- Anmeldungen (RSVP) pro Schüler und Sitzung
- Fragen mit Upvotes und Moderationsstatus

Struktur:
- models.py: Datenmodelle für Sitzungen, Anmeldungen und Fragen
- serializers.py: API-Serialisierung
- views/: Schüler-Views (Admin-Views liegen in administration/)

Author: DSP Development Team
Version: 1.0.0
"""
