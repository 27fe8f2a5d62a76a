"""
E-Learning Certificates Package - DSP (Digital Solutions Platform)

Dieses Paket enthält die Zertifikatsausstellung des E-Learning-Systems.
Ein Zertifikat wird pro Student und Kurs höchstens einmal ausgestellt und
ist über einen öffentlichen Code überprüfbar.

Struktur:
- models.py: Zertifikat-Modell
- serializers.py: API-Serialisierung
- views/: Ausstellung und öffentliche Überprüfung

Author: DSP Development Team
Version: 1.0.0
"""
