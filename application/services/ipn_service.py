"""
Application service reconciling PayPal IPNs with orders.

Pipeline: verify -> classify -> dispatch. The service keeps no state between
notifications; repeated deliveries are made harmless by the eligibility
predicates of the order-processing port, not by this class.
"""
from __future__ import annotations

from typing import Any, Optional

from application.ports.order_processing import OrderProcessingPort
from application.ports.payment_gateway import NotificationVerifier
from core.logging_config import get_logger
from domain.common.exceptions import BusinessException
from domain.payment.entity import Order, PaymentStatus
from domain.payment.notification import NotificationPayload, parse_guid
from domain.payment.repository import OrderRepository, RecurringPaymentRepository
from domain.payment.service import classify_payment_status


logger = get_logger(__name__)

TXN_RECURRING_PROFILE_CREATED = "recurring_payment_profile_created"
TXN_RECURRING_PAYMENT = "recurring_payment"

# Statuses that count as a successful recurring cycle
_RECURRING_SUCCESS = (PaymentStatus.AUTHORIZED, PaymentStatus.PAID)


def format_notification(fields: NotificationPayload, status: PaymentStatus) -> str:
    """Human-readable dump used for order notes and log payloads."""
    lines = ["Paypal IPN:"]
    lines.extend(f"{key}: {value}" for key, value in fields.items())
    lines.append(f"New payment status: {str(status)}")
    return "\n".join(lines)


class PayPalIPNService:
    def __init__(
        self,
        *,
        verifier: NotificationVerifier,
        orders: OrderRepository,
        recurring_payments: RecurringPaymentRepository,
        order_processing: OrderProcessingPort,
        log: Any = None,
    ) -> None:
        self.verifier = verifier
        self.orders = orders
        self.recurring_payments = recurring_payments
        self.order_processing = order_processing
        self.log = log or logger

    async def handle(self, raw: str, user_agent: Optional[str] = None) -> None:
        """Process one notification end to end. Never raises."""
        try:
            result = await self.verifier.verify(raw, user_agent)
            if not result.verified:
                self.log.error("paypal_ipn_verification_failed", ipn_data=raw)
                return
            fields = result.fields
            status = classify_payment_status(fields.get("payment_status"), fields.get("pending_reason"))
            await self.dispatch(fields, status)
        except BusinessException as exc:
            self.log.error(
                "paypal_ipn_malformed",
                error=exc.message,
                error_type=exc.error_type,
                details=exc.details,
                ipn_data=raw,
            )
        except Exception as exc:
            self.log.error("paypal_ipn_processing_failed", error=str(exc), ipn_data=raw, exc_info=True)

    async def dispatch(self, fields: NotificationPayload, status: PaymentStatus) -> None:
        txn_type = fields.get("txn_type")
        if txn_type == TXN_RECURRING_PROFILE_CREATED:
            self.log.debug("paypal_ipn_profile_created", txn_id=fields.get("txn_id"))
            return
        if txn_type == TXN_RECURRING_PAYMENT:
            await self._dispatch_recurring(fields, status)
            return
        await self._dispatch_order(fields, status)

    async def _resolve_order(self, value: Optional[str]) -> Optional[Order]:
        order_guid = parse_guid(value)
        if order_guid is None:
            return None
        return await self.orders.get_by_guid(order_guid)

    async def _dispatch_recurring(self, fields: NotificationPayload, status: PaymentStatus) -> None:
        summary = format_notification(fields, status)
        initial_order = await self._resolve_order(fields.get("rp_invoice_id"))
        if initial_order is None:
            self.log.error("paypal_ipn_order_not_found", details=summary, rp_invoice_id=fields.get("rp_invoice_id"))
            return

        recurring_payments = await self.recurring_payments.search_by_initial_order(initial_order.id)
        for rp in recurring_payments:
            if status not in _RECURRING_SUCCESS:
                continue
            if rp.is_first_cycle:
                rp.record_first_cycle(initial_order.id)
                await self.recurring_payments.update(rp)
            else:
                await self.order_processing.process_next_recurring_payment(rp)

        self.log.info("paypal_ipn_recurring_info", details=summary, order_id=initial_order.id)

    async def _dispatch_order(self, fields: NotificationPayload, status: PaymentStatus) -> None:
        summary = format_notification(fields, status)
        order = await self._resolve_order(fields.get("custom"))
        if order is None:
            self.log.error("paypal_ipn_order_not_found", details=summary, custom=fields.get("custom"))
            return

        order.add_note(summary, display_to_customer=False)
        await self.orders.update(order)

        await self._apply_transition(order, status)

    async def _apply_transition(self, order: Order, status: PaymentStatus) -> None:
        """Apply at most one transition, only when its predicate allows it."""
        op = self.order_processing
        transitions = {
            PaymentStatus.AUTHORIZED: (op.can_mark_order_as_authorized, op.mark_as_authorized),
            PaymentStatus.PAID: (op.can_mark_order_as_paid, op.mark_order_as_paid),
            PaymentStatus.REFUNDED: (op.can_refund_offline, op.refund_offline),
            PaymentStatus.VOIDED: (op.can_void_offline, op.void_offline),
        }
        if status not in transitions:
            return
        can_apply, apply = transitions[status]
        if not await can_apply(order):
            self.log.debug("paypal_ipn_transition_skipped", order_id=order.id, status=status.value)
            return
        await apply(order)
        self.log.info("paypal_ipn_transition_applied", order_id=order.id, status=status.value)
