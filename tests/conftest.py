"""Pytest bootstrap configuration.

In-memory stand-ins for the collaborators the IPN service talks to.
"""
import uuid

import pytest

from application.dtos.payments import VerificationResult
from application.services.ipn_service import PayPalIPNService
from domain.payment.entity import Order, RecurringPayment
from domain.payment.notification import parse_notification
from domain.payment.repository import OrderRepository, RecurringPaymentRepository


class InMemoryOrderRepository(OrderRepository):
    def __init__(self, *orders: Order):
        self.orders = {o.order_guid: o for o in orders}
        self.updated: list[Order] = []

    async def get_by_guid(self, order_guid):
        return self.orders.get(order_guid)

    async def update(self, order):
        self.updated.append(order)
        return order


class InMemoryRecurringPaymentRepository(RecurringPaymentRepository):
    def __init__(self, *recurring_payments: RecurringPayment):
        self.items = list(recurring_payments)
        self.updated: list[RecurringPayment] = []

    async def search_by_initial_order(self, initial_order_id):
        return [rp for rp in self.items if rp.initial_order_id == initial_order_id]

    async def update(self, recurring_payment):
        self.updated.append(recurring_payment)
        return recurring_payment


class RecordingOrderProcessing:
    """Order-processing port recording every call; predicates are configurable."""

    def __init__(self, **eligible: bool):
        self.eligible = {
            "authorized": True,
            "paid": True,
            "refund": True,
            "void": True,
            **eligible,
        }
        self.calls: list[tuple[str, object]] = []

    async def can_mark_order_as_authorized(self, order):
        return self.eligible["authorized"]

    async def mark_as_authorized(self, order):
        self.calls.append(("mark_as_authorized", order))

    async def can_mark_order_as_paid(self, order):
        return self.eligible["paid"]

    async def mark_order_as_paid(self, order):
        self.calls.append(("mark_order_as_paid", order))
        # a paid order is no longer eligible, like a real order store
        self.eligible["paid"] = False

    async def can_refund_offline(self, order):
        return self.eligible["refund"]

    async def refund_offline(self, order):
        self.calls.append(("refund_offline", order))

    async def can_void_offline(self, order):
        return self.eligible["void"]

    async def void_offline(self, order):
        self.calls.append(("void_offline", order))

    async def process_next_recurring_payment(self, recurring_payment):
        self.calls.append(("process_next_recurring_payment", recurring_payment))

    def called(self, name: str) -> int:
        return sum(1 for n, _ in self.calls if n == name)


class RecordingLogger:
    def __init__(self):
        self.entries: list[tuple[str, str, dict]] = []

    def _record(self, level, event, **kw):
        self.entries.append((level, event, kw))

    def debug(self, event, **kw):
        self._record("debug", event, **kw)

    def info(self, event, **kw):
        self._record("info", event, **kw)

    def warning(self, event, **kw):
        self._record("warning", event, **kw)

    def error(self, event, **kw):
        self._record("error", event, **kw)

    def events(self, level=None) -> list[str]:
        return [e for lvl, e, _ in self.entries if level is None or lvl == level]


class StubVerifier:
    """Verifier that trusts (or rejects) every payload without network I/O."""

    def __init__(self, verified: bool = True):
        self.verified = verified
        self.calls: list[tuple[str, object]] = []

    async def verify(self, raw, user_agent=None):
        self.calls.append((raw, user_agent))
        if not self.verified:
            return VerificationResult(verified=False)
        return VerificationResult(verified=True, fields=parse_notification(raw))


ORDER_GUID = uuid.UUID("5f0b3c1e-9a4d-4c47-8a59-1f2e3d4c5b6a")


@pytest.fixture
def order():
    return Order(id=7, order_guid=ORDER_GUID)


@pytest.fixture
def orders(order):
    return InMemoryOrderRepository(order)


@pytest.fixture
def recurring_payments():
    return InMemoryRecurringPaymentRepository()


@pytest.fixture
def processing():
    return RecordingOrderProcessing()


@pytest.fixture
def log():
    return RecordingLogger()


@pytest.fixture
def verifier():
    return StubVerifier()


@pytest.fixture
def service(verifier, orders, recurring_payments, processing, log):
    return PayPalIPNService(
        verifier=verifier,
        orders=orders,
        recurring_payments=recurring_payments,
        order_processing=processing,
        log=log,
    )


@pytest.fixture
def make_service(processing, log):
    """Build a service around a given order and recurring profiles."""

    def _make(order: Order, *profiles: RecurringPayment, verified: bool = True):
        recurring = InMemoryRecurringPaymentRepository(*profiles)
        svc = PayPalIPNService(
            verifier=StubVerifier(verified=verified),
            orders=InMemoryOrderRepository(order),
            recurring_payments=recurring,
            order_processing=processing,
            log=log,
        )
        return svc, recurring

    return _make
