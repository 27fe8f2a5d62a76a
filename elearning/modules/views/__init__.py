"""
E-Learning Modules Views Package - DSP (Digital Solutions Platform)

Dieses Paket enthält alle Views für Kurse und den Lernfortschritt.

Features:
- Öffentliche Kurs-Liste und Kurs-Details
- Fortschrittsübersicht für eingeschriebene Studenten

Author: DSP Development Team
Created: 10.07.2025
Version: 1.0.0
"""

from .module_views import *
