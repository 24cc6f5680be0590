"""
订单仓储接口 - IPN 核心依赖的数据访问抽象

Implementations live in the hosting application; the IPN core only reads
orders by GUID and persists the notes/history it appends.
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from .entity import Order, RecurringPayment


class OrderRepository(ABC):
    """订单仓储抽象接口 - 只定义能做什么，不管怎么做"""

    @abstractmethod
    async def get_by_guid(self, order_guid: uuid.UUID) -> Optional[Order]:
        """根据订单GUID获取订单"""
        pass

    @abstractmethod
    async def update(self, order: Order) -> Order:
        """更新订单（含新追加的备注）"""
        pass


class RecurringPaymentRepository(ABC):
    """周期付款仓储抽象接口"""

    @abstractmethod
    async def search_by_initial_order(self, initial_order_id: int) -> List[RecurringPayment]:
        """获取首个订单关联的全部周期付款"""
        pass

    @abstractmethod
    async def update(self, recurring_payment: RecurringPayment) -> RecurringPayment:
        """更新周期付款（含新追加的历史记录）"""
        pass
