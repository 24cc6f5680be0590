"""
Order processing port (application/ports).

Eligibility predicates gate every state transition requested by an IPN;
they are what makes redelivered notifications harmless.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from domain.payment.entity import Order, RecurringPayment


@runtime_checkable
class OrderProcessingPort(Protocol):
    async def can_mark_order_as_authorized(self, order: Order) -> bool: ...

    async def mark_as_authorized(self, order: Order) -> None: ...

    async def can_mark_order_as_paid(self, order: Order) -> bool: ...

    async def mark_order_as_paid(self, order: Order) -> None: ...

    async def can_refund_offline(self, order: Order) -> bool: ...

    async def refund_offline(self, order: Order) -> None: ...

    async def can_void_offline(self, order: Order) -> bool: ...

    async def void_offline(self, order: Order) -> None: ...

    async def process_next_recurring_payment(self, recurring_payment: RecurringPayment) -> None: ...
