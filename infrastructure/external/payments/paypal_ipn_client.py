"""
PayPal IPN verifier.

Re-posts the untouched notification body with ``cmd=_notify-validate`` to
PayPal and accepts the notification only when PayPal answers ``VERIFIED``.
Shared concerns (http client reuse, timeouts, retry, logging) follow the
other outbound clients in this package.
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, Callable, Optional
from urllib.parse import unquote_plus

import httpx
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential, retry_if_exception_type

from core.logging_config import get_logger
from core.settings import payment_settings, PAYPAL_LIVE_URL, PAYPAL_SANDBOX_URL
from application.dtos.payments import VerificationResult
from application.ports.payment_gateway import NotificationVerifier
from domain.payment.notification import parse_notification


VALIDATE_SUFFIX = "&cmd=_notify-validate"
VERIFIED = "VERIFIED"


class PayPalIPNClient(NotificationVerifier):
    provider: str = "paypal"

    def __init__(
        self,
        *,
        is_live: Optional[bool] = None,
        timeouts: Optional[dict[str, float]] = None,
        retry: Optional[dict[str, Any]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.is_live = payment_settings.paypal.is_live if is_live is None else is_live
        self._timeouts_cfg = timeouts or payment_settings.timeouts.model_dump()
        self._retry_cfg = retry or {"max": payment_settings.retry.max, "base": payment_settings.retry.base_backoff}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self.log = get_logger(__name__, provider=self.provider, live=self.is_live)

    @property
    def url(self) -> str:
        return PAYPAL_LIVE_URL if self.is_live else PAYPAL_SANDBOX_URL

    @property
    def timeouts(self) -> httpx.Timeout:
        """Per-attempt limits; the pool wait shares the connect budget."""
        return httpx.Timeout(
            connect=self._timeouts_cfg["connect"],
            read=self._timeouts_cfg["read"],
            write=self._timeouts_cfg["write"],
            pool=self._timeouts_cfg["connect"],
        )

    @property
    def deadline(self) -> float:
        """Upper bound in seconds for one verification, retries and backoff included."""
        return float(self._timeouts_cfg["total"])

    @asynccontextmanager
    async def client(self):
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeouts, transport=self._transport)
        try:
            yield self._client
        finally:
            # Keep open for reuse; explicit aclose() will close.
            ...

    async def aclose(self) -> None:
        """Close underlying HTTP client if created."""
        if self._client is not None:
            try:
                await self._client.aclose()
            finally:
                self._client = None

    async def _retry(self, fn: Callable[[], Any]):
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(int(self._retry_cfg["max"]) + 1),
            wait=wait_exponential(multiplier=self._retry_cfg["base"], min=0.1, max=2.0),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                return await fn()

    async def verify(self, raw: str, user_agent: Optional[str] = None) -> VerificationResult:
        """Ask PayPal whether ``raw`` is a notification it sent.

        Never raises on transport problems. Timeouts, connection or TLS errors,
        an exceeded overall deadline and non-2xx answers all yield
        ``verified=False``.
        """
        try:
            # latin-1 maps each code point back to the byte PayPal sent
            content = (raw + VALIDATE_SUFFIX).encode("latin-1")
        except UnicodeEncodeError:
            self._log("paypal_ipn_verify_unencodable", level="warning")
            return VerificationResult(verified=False)

        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        if user_agent:
            headers["User-Agent"] = user_agent

        async def _post() -> httpx.Response:
            async with self.client() as c:
                return await c.post(self.url, content=content, headers=headers)

        try:
            response = await asyncio.wait_for(self._retry(_post), timeout=self.deadline)
        except asyncio.TimeoutError:
            self._log("paypal_ipn_verify_deadline_exceeded", level="warning", deadline=self.deadline)
            return VerificationResult(verified=False)
        except httpx.HTTPError as exc:
            self._log("paypal_ipn_verify_transport_error", level="warning", error=str(exc), error_type=type(exc).__name__)
            return VerificationResult(verified=False)

        if not response.is_success:
            self._log("paypal_ipn_verify_http_error", level="warning", status_code=response.status_code)
            return VerificationResult(verified=False)

        answer = unquote_plus(response.text).strip()
        if answer.upper() != VERIFIED:
            self._log("paypal_ipn_verify_rejected", level="warning", answer=answer[:64])
            return VerificationResult(verified=False)

        self._log("paypal_ipn_verified")
        return VerificationResult(verified=True, fields=parse_notification(raw))

    def _log(self, event: str, *, level: str = "info", **kwargs) -> None:
        getattr(self.log, level)(event, **kwargs)
