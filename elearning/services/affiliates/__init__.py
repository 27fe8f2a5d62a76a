"""
Affiliate Services Package für DSP E-Learning Platform

Dieses Paket enthält alle Services für das Partnerprogramm:
- Partner-Bewerbung und Code-Generierung
- Klick-Tracking
- Provisionszuordnung bei abgeschlossenen Zahlungen

Author: DSP Development Team
Version: 1.0.0
"""

from .attribution_service import (
    AffiliateService,
    calculate_commission,
    generate_affiliate_code,
)

__all__ = ["AffiliateService", "calculate_commission", "generate_affiliate_code"]
