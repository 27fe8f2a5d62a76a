"""
E-Learning Lessons Package - DSP (Digital Solutions Platform)

Dieses Paket enthält die Lektionen eines Moduls und den
Lektionsfortschritt der Schüler.

Features:
- Geordnete Lektionen mit optionalem Video
- Lektionsfortschritt mit maximal gesehenem Videoanteil
- Automatischer Abschluss ab 90 % Videofortschritt

Struktur:
- models.py: Datenmodelle für Lektionen und Fortschritt
- serializers.py: API-Serialisierung
- views/: Schüler-Views

Author: DSP Development Team
Version: 1.0.0
"""
