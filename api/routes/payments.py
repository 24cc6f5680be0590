"""
Payments API routes.

Exposes the PayPal IPN callback. Keep this thin: verification and
reconciliation live in the application service.
"""
from __future__ import annotations

import ipaddress

from fastapi import APIRouter, Depends, Request, Response

from application.services.ipn_service import PayPalIPNService
from api.dependencies import get_ipn_service
from core.logging_config import get_logger
from core.settings import payment_settings


router = APIRouter(prefix="/payments", tags=["Payments"])
logger = get_logger(__name__)


def _ip_allowed(remote_ip: str | None) -> bool:
    allowlist = payment_settings.webhook.ip_allowlist or []
    if not allowlist:
        return True
    if not remote_ip:
        return False
    try:
        rip = ipaddress.ip_address(remote_ip)
    except ValueError:
        return False
    for entry in allowlist:
        try:
            if "/" in entry:
                if rip in ipaddress.ip_network(entry, strict=False):
                    return True
            elif remote_ip == entry:
                return True
        except ValueError:
            continue
    return False


@router.post("/paypal/ipn", summary="PayPal IPN callback")
async def paypal_ipn(request: Request, service: PayPalIPNService = Depends(get_ipn_service)):
    # PayPal only needs a 200; every branch below acknowledges receipt.
    ct = (request.headers.get("content-type") or "").lower()
    if "application/x-www-form-urlencoded" not in ct:
        logger.warning("paypal_ipn_content_type_unsupported", content_type=ct)
        return Response(status_code=200)

    remote_ip = request.client.host if request.client else None
    if not _ip_allowed(remote_ip):
        logger.warning("paypal_ipn_ip_not_allowed", remote_ip=remote_ip)
        return Response(status_code=200)

    raw_body = await request.body()
    # latin-1 keeps a 1:1 byte mapping so verification re-posts the exact body
    await service.handle(raw_body.decode("latin-1"), request.headers.get("user-agent"))
    return Response(status_code=200)
