"""
E-Learning Quizzes Package - DSP (Digital Solutions Platform)

Dieses Paket enthält das Quiz-System des E-Learning-Systems.
Jedes Modul kann genau ein Quiz besitzen; das Bestehen schaltet das
nächste Pflichtmodul frei.

Features:
- Multiple-Choice-Fragen mit genau einer richtigen Antwort
- Bestehensgrenze pro Quiz oder pro Kurs
- Unveränderliche, fortlaufend nummerierte Versuche

Struktur:
- models.py: Datenmodelle für Quiz, Fragen und Versuche
- serializers.py: API-Serialisierung für Quizdaten
- views/: Schüler-Views

Author: DSP Development Team
Created: 10.07.2025
Version: 1.0.0
"""
