from structlog.testing import capture_logs

from core.config import settings
from core.logging_config import add_service_context, get_logger


def test_service_context_is_added():
    event = add_service_context(None, "info", {"event": "ping"})
    assert event["service"] == settings.PROJECT_NAME
    assert event["environment"] == settings.ENVIRONMENT


def test_service_context_keeps_explicit_values():
    event = add_service_context(None, "info", {"event": "ping", "service": "other"})
    assert event["service"] == "other"


def test_get_logger_binds_initial_values():
    with capture_logs() as logs:
        get_logger("tests.logging", provider="paypal", live=True).info("paypal_ipn_verified")

    assert len(logs) == 1
    assert logs[0]["event"] == "paypal_ipn_verified"
    assert logs[0]["provider"] == "paypal"
    assert logs[0]["live"] is True
