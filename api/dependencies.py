"""
FastAPI dependencies and service wiring.
"""
from typing import Optional

from fastapi import Request

from application.ports.order_processing import OrderProcessingPort
from application.services.ipn_service import PayPalIPNService
from domain.payment.repository import OrderRepository, RecurringPaymentRepository
from infrastructure.external.payments import get_notification_verifier


def build_ipn_service(
    *,
    orders: OrderRepository,
    recurring_payments: RecurringPaymentRepository,
    order_processing: OrderProcessingPort,
    is_live: Optional[bool] = None,
) -> PayPalIPNService:
    """Assemble the IPN service around the host's order collaborators and a PayPal verifier."""
    return PayPalIPNService(
        verifier=get_notification_verifier(is_live=is_live),
        orders=orders,
        recurring_payments=recurring_payments,
        order_processing=order_processing,
    )


def get_ipn_service(request: Request) -> PayPalIPNService:
    """Return the IPN service wired by create_app()."""
    return request.app.state.ipn_service
