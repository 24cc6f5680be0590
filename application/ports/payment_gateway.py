"""
Notification verifier port (application/ports) exposing a replaceable protocol.

Application depends on this Protocol; infrastructure implements adapters.
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from application.dtos.payments import VerificationResult


@runtime_checkable
class NotificationVerifier(Protocol):
    """Re-validates an inbound notification with the gateway that sent it.

    Implementations must not raise on transport failures; an unreachable
    gateway is reported as ``verified=False``.
    """

    async def verify(self, raw: str, user_agent: Optional[str] = None) -> VerificationResult: ...
