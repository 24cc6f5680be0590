"""
全局异常处理器
"""
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status as http_status

from shared.codes import BusinessCode
from core.logging_config import get_logger
from domain.common.exceptions import BusinessException


def _error_body(code: int, message: str, error_type: str, request_id: str, details=None) -> dict:
    return {
        "code": int(code),
        "message": message,
        "error": {"type": error_type, "details": details, "request_id": request_id},
    }


def register_exception_handlers(app: FastAPI):
    """
    注册全局异常处理器

    Args:
        app: FastAPI应用实例
    """
    logger = get_logger(__name__)

    @app.exception_handler(BusinessException)
    async def business_exception_handler(request: Request, exc: BusinessException):
        """处理业务异常"""
        request_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())
        logger.warning("business_exception", request_id=request_id, error_type=exc.error_type, error=exc.message)
        return JSONResponse(
            status_code=http_status.HTTP_400_BAD_REQUEST,
            content=_error_body(exc.code, exc.message, exc.error_type, request_id, exc.details),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """处理所有未捕获的异常"""
        request_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())
        logger.error(
            "unhandled_exception",
            request_id=request_id,
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(BusinessCode.SYSTEM_ERROR, "Internal server error", "SystemError", request_id),
        )
