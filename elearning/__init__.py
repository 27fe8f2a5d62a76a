"""
E-Learning Package - DSP (Digital Solutions Platform)

Dieses Paket enthält alle Module für das Academy-Backend.
Kurse mit freischaltbaren Modulen, Quizzen, Meilensteinen und Zertifikaten,
dazu das Partnerprogramm und das Zahlungsbuch.

Features:
- Benutzerverwaltung und JWT-Authentifizierung per Cookie
- Sequentielle Modul-Freischaltung über bestandene Quizze
- Meilensteine und Abschlusszertifikate
- Partnerprogramm mit Klick-Tracking und Provisionen
- Staff-Aktionen mit Audit-Log

Struktur:
- users/: Benutzerverwaltung und Authentifizierung
- modules/: Kurse, Module, Einschreibungen, Fortschritt, Meilensteine
- quizzes/: Quizze, Fragen und Versuche
- certificates/: Abschlusszertifikate
- payments/: Zahlungsbuch (wird von core.stripe_integration abgeglichen)
- affiliates/: Partnerprogramm
- administration/: Audit-Log und Staff-Endpunkte
- services/: Geschäftslogik
- management/: Django Management Commands

Author: DSP Development Team
Created: 10.07.2025
Version: 1.0.0
"""
