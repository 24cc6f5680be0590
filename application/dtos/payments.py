"""
Payment DTOs used at application boundaries.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from domain.payment.notification import NotificationPayload


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of re-posting an IPN to PayPal. Transient, never persisted."""

    verified: bool
    fields: NotificationPayload = field(default_factory=NotificationPayload)
