"""
FastAPI应用主入口

There is no module-level app: the hosting application owns the order and
recurring-payment stores, so it calls create_app() with either a ready
PayPalIPNService or the three collaborators, e.g.

    app = create_app(orders=..., recurring_payments=..., order_processing=...)
"""
from typing import Optional

from contextlib import asynccontextmanager
from fastapi import FastAPI

from api.routes import payments as payments_routes
from api.dependencies import build_ipn_service
from api.middleware import RequestIDMiddleware
from application.ports.order_processing import OrderProcessingPort
from application.services.ipn_service import PayPalIPNService
from core.config import settings
from core.exceptions import register_exception_handlers
from core.logging_config import get_logger, configure_logging
from domain.payment.repository import OrderRepository, RecurringPaymentRepository


# 初始化日志：在入口处显式配置，避免模块导入时的副作用
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    verifier = getattr(app.state.ipn_service, "verifier", None)
    logger.info("ipn_service_ready", verifier=type(verifier).__name__)
    yield
    close = getattr(verifier, "aclose", None)
    if callable(close):
        await close()
    logger.info("application_shutdown", message="Application shutdown")


def create_app(
    ipn_service: Optional[PayPalIPNService] = None,
    *,
    orders: Optional[OrderRepository] = None,
    recurring_payments: Optional[RecurringPaymentRepository] = None,
    order_processing: Optional[OrderProcessingPort] = None,
) -> FastAPI:
    if ipn_service is None:
        if orders is None or recurring_payments is None or order_processing is None:
            raise ValueError(
                "create_app() needs an ipn_service or orders, recurring_payments and order_processing"
            )
        ipn_service = build_ipn_service(
            orders=orders,
            recurring_payments=recurring_payments,
            order_processing=order_processing,
        )

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.ipn_service = ipn_service
    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(payments_routes.router, prefix=settings.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok", "version": settings.VERSION}

    return app
