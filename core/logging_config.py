"""
Structlog 日志配置模块

stdlib logging 与 structlog 共用一条处理链；每条日志都带上服务名与环境，
请求内的日志再由 RequestIDMiddleware 通过 contextvars 补充 request_id 等字段。
"""
import logging
import json
import structlog
from structlog.processors import TimeStamper, add_log_level, JSONRenderer
from structlog.dev import ConsoleRenderer
from structlog.contextvars import merge_contextvars
from structlog.stdlib import ProcessorFormatter
from typing import Any, List

from core.config import settings


# 按请求记日志的第三方库：只保留告警，结果由调用方自行记录
NOISY_LOGGERS = ("httpx", "httpcore")


def add_service_context(logger: Any, method_name: str, event_dict: dict) -> dict:
    """为每条日志补充 service / environment 字段（已存在的值不覆盖）"""
    event_dict.setdefault("service", settings.PROJECT_NAME)
    event_dict.setdefault("environment", settings.ENVIRONMENT)
    return event_dict


def get_renderer() -> Any:
    """DEBUG 下用彩色控制台输出，其余环境输出 JSON（保留中文等非 ASCII 字符）"""
    if settings.DEBUG:
        return ConsoleRenderer(colors=True)

    def _dumps(obj, default=None, **kwargs):
        return json.dumps(obj, ensure_ascii=False, default=default, **kwargs)
    return JSONRenderer(serializer=_dumps)


def resolve_level() -> int:
    if settings.LOG_LEVEL:
        return logging.getLevelName(settings.LOG_LEVEL.upper())
    return logging.DEBUG if settings.DEBUG else logging.INFO


def configure_logging() -> None:
    """配置 structlog 并把根 logger 的输出交给同一渲染器。"""
    shared_pre_chain: List[Any] = [
        merge_contextvars,
        add_service_context,
        add_log_level,
        TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*shared_pre_chain, ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        ProcessorFormatter(
            foreign_pre_chain=shared_pre_chain,
            processors=[ProcessorFormatter.remove_processors_meta, get_renderer()],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(resolve_level())
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = __name__, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """获取 structlog logger，可预先绑定固定字段（如 provider）。"""
    return structlog.get_logger(name, **initial_values)
