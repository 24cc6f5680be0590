"""
支付领域实体 - 订单与周期付款

The IPN core never creates or deletes these; they are handed out by the
order/recurring-payment repositories and mutated only through the methods
below or through the order-processing port.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class PaymentStatus(str, Enum):
    """Internal payment status derived from a notification (never persisted here)."""
    PENDING = "pending"
    AUTHORIZED = "authorized"
    PAID = "paid"
    REFUNDED = "refunded"
    VOIDED = "voided"

    def __str__(self) -> str:
        return self.name.capitalize()


def _ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """确保时间为 UTC 时区"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class OrderNote:
    note: str
    display_to_customer: bool = False
    created_on_utc: Optional[datetime] = None

    def __post_init__(self):
        self.created_on_utc = _ensure_utc(self.created_on_utc)


@dataclass
class Order:
    id: int
    order_guid: uuid.UUID
    notes: list[OrderNote] = field(default_factory=list)

    def add_note(self, text: str, *, display_to_customer: bool = False) -> OrderNote:
        """追加订单备注（默认对客户不可见）"""
        note = OrderNote(
            note=text,
            display_to_customer=display_to_customer,
            created_on_utc=datetime.now(timezone.utc),
        )
        self.notes.append(note)
        return note


@dataclass
class RecurringPaymentHistory:
    recurring_payment_id: int
    order_id: int
    created_on_utc: Optional[datetime] = None

    def __post_init__(self):
        self.created_on_utc = _ensure_utc(self.created_on_utc)


@dataclass
class RecurringPayment:
    """
    周期付款 - 绑定到首个订单

    业务规则：
    1. history 为空表示首期尚未记账
    2. 首期之后的每一期由 "process next recurring payment" 负责记账
    """

    id: int
    initial_order_id: int
    history: list[RecurringPaymentHistory] = field(default_factory=list)

    @property
    def is_first_cycle(self) -> bool:
        return not self.history

    def record_first_cycle(self, order_id: int) -> RecurringPaymentHistory:
        entry = RecurringPaymentHistory(
            recurring_payment_id=self.id,
            order_id=order_id,
            created_on_utc=datetime.now(timezone.utc),
        )
        self.history.append(entry)
        return entry
