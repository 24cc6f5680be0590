"""
支付领域服务 - PayPal 状态归类
"""
from typing import Optional

from .entity import PaymentStatus
from shared.codes.payment_codes import (
    PAYPAL_STATUS_TO_INTERNAL,
    PAYPAL_PENDING_REASON_TO_INTERNAL,
)


def classify_payment_status(payment_status: Optional[str], pending_reason: Optional[str]) -> PaymentStatus:
    """
    将 PayPal 的 (payment_status, pending_reason) 归类为内部支付状态

    业务规则：
    1. 大小写不敏感，None 视为空字符串
    2. pending + authorization 为已授权，其余 pending 均为待处理
    3. 未知状态一律视为待处理
    """
    status = (payment_status or "").lower()
    reason = (pending_reason or "").lower()

    if status == "pending":
        return PaymentStatus(PAYPAL_PENDING_REASON_TO_INTERNAL.get(reason, PaymentStatus.PENDING.value))
    return PaymentStatus(PAYPAL_STATUS_TO_INTERNAL.get(status, PaymentStatus.PENDING.value))
