"""
Payment specific codes and PayPal IPN status mapping.
"""
from __future__ import annotations

from enum import IntEnum


class PaymentCode(IntEnum):
    # Notification payload errors (61xxx)
    MALFORMED_NOTIFICATION = 61000


# PayPal payment_status (lowercased) -> internal PaymentStatus value.
# "pending" is resolved together with pending_reason, see PAYPAL_PENDING_REASON_TO_INTERNAL.
PAYPAL_STATUS_TO_INTERNAL = {
    "processed": "paid",
    "completed": "paid",
    "canceled_reversal": "paid",
    "denied": "voided",
    "expired": "voided",
    "failed": "voided",
    "voided": "voided",
    "refunded": "refunded",
    "reversed": "refunded",
}

PAYPAL_PENDING_REASON_TO_INTERNAL = {
    "authorization": "authorized",
}
