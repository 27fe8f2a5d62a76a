"""
E-Learning Administration Package - DSP (Digital Solutions Platform)

Dieses Paket enthält die Admin-Aktionen auf Studentendaten (Module freischalten,
Fortschritt zurücksetzen, Zertifikate ausstellen, Partner verwalten) sowie das
Audit-Log, das jede dieser Aktionen protokolliert.

Author: DSP Development Team
Version: 1.0.0
"""
