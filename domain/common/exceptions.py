"""领域层业务异常定义，供领域与基础设施使用。

核心（core）层仅负责全局映射与异常处理，尽量避免领域层反向依赖核心层。
"""
from __future__ import annotations

from typing import Optional
from shared.codes.payment_codes import PaymentCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class MalformedNotificationException(BusinessException):
    """IPN payload cannot be turned into a field mapping (e.g. a repeated key)."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(
            code=PaymentCode.MALFORMED_NOTIFICATION,
            message=message,
            error_type="MalformedNotification",
            details={"field": field} if field else None,
            field=field,
        )
