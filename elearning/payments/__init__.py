"""
E-Learning Payments Package - DSP (Digital Solutions Platform)

Dieses Paket enthält das Zahlungsbuch (Payment Ledger) des E-Learning-Systems.
Die Zahlungen werden ausschließlich vom Stripe-Abgleich in
``core.stripe_integration`` verändert.

Author: DSP Development Team
Version: 1.0.0
"""
