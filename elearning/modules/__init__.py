"""
E-Learning Modules Package - DSP (Digital Solutions Platform)

Dieses Paket enthält Kurse und das Lernmodul-System im E-Learning-System.

Features:
- Kurse mit Preis, Ratenanzahl und Bestehensgrenze
- Geordnete Pflicht- und Bonusmodule
- Einschreibungen und Modul-Fortschritt pro Student
- Meilensteine und vergebene Abzeichen

Struktur:
- models.py: Datenmodelle für Kurse, Module, Fortschritt und Meilensteine
- serializers.py: API-Serialisierung für Kurs- und Fortschrittsdaten
- views/: Kurs-Views und Fortschrittsübersicht

Author: DSP Development Team
Created: 10.07.2025
Version: 1.0.0
"""
