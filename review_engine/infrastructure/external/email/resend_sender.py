"""Resend transactional email sender (HTTP API)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from review_engine.infrastructure.exceptions import EmailDeliveryException
from review_engine.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class ResendEmailSender:
    """IEmailSender implementation backed by the Resend /emails endpoint."""

    def __init__(
        self,
        api_key: str,
        from_address: str,
        *,
        api_url: str = "https://api.resend.com",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        self._api_key = api_key
        self._from = from_address
        self._api_url = api_url.rstrip("/")
        self._shared_http = http_client
        self._timeout = timeout

    @asynccontextmanager
    async def _http_cm(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield shared HTTP client or a short-lived one."""
        if self._shared_http is not None:
            yield self._shared_http
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    async def send(self, to: str, subject: str, html: str) -> str | None:
        """Send one email and return the Resend message id.

        Raises:
            EmailDeliveryException: non-2xx response or transport error.
        """
        body = {"from": self._from, "to": [to], "subject": subject, "html": html}
        async with self._http_cm() as client:
            try:
                response = await client.post(
                    f"{self._api_url}/emails",
                    headers={"Authorization": f"Bearer {self._api_key}"},
                    json=body,
                    timeout=self._timeout,
                )
            except httpx.HTTPError as e:
                raise EmailDeliveryException(to, str(e) or type(e).__name__) from e
        if response.is_error:
            raise EmailDeliveryException(
                to, response.text[:200], status_code=response.status_code
            )
        data = response.json() if response.content else {}
        message_id = data.get("id") if isinstance(data, dict) else None
        logger.debug("Resend accepted email (id=%s)", message_id)
        return message_id
