"""
Factory for the IPN notification verifier.
"""
from __future__ import annotations

from typing import Optional

from core.settings import payment_settings
from application.ports.payment_gateway import NotificationVerifier


def get_notification_verifier(is_live: Optional[bool] = None) -> NotificationVerifier:
    from .paypal_ipn_client import PayPalIPNClient
    live = payment_settings.paypal.is_live if is_live is None else is_live
    return PayPalIPNClient(is_live=live)
