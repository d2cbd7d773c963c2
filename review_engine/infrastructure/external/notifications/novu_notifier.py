"""Novu in-app notifier: one bulk trigger per task review run."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from review_engine.application.dtos.task_review import InAppEvent
from review_engine.infrastructure.exceptions import InAppDeliveryException
from review_engine.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class NovuInAppNotifier:
    """IInAppNotifier implementation backed by Novu's bulk event trigger."""

    def __init__(
        self,
        api_key: str,
        workflow_id: str,
        *,
        api_url: str = "https://api.novu.co",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        self._api_key = api_key
        self._workflow_id = workflow_id
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

    def _to_event(self, event: InAppEvent) -> dict[str, Any]:
        return {
            "name": self._workflow_id,
            "to": {"subscriberId": event.subscriber_id, "email": event.email},
            "payload": event.payload,
        }

    async def trigger_bulk(self, events: list[InAppEvent]) -> None:
        """Trigger all events in a single request; no-op for an empty list.

        Raises:
            InAppDeliveryException: non-2xx response or transport error.
        """
        if not events:
            return
        body = {"events": [self._to_event(e) for e in events]}
        async with self._http_cm() as client:
            try:
                response = await client.post(
                    f"{self._api_url}/v1/events/trigger/bulk",
                    headers={"Authorization": f"ApiKey {self._api_key}"},
                    json=body,
                    timeout=self._timeout,
                )
            except httpx.HTTPError as e:
                raise InAppDeliveryException(
                    len(events), str(e) or type(e).__name__
                ) from e
        if response.is_error:
            raise InAppDeliveryException(
                len(events), response.text[:200], status_code=response.status_code
            )
        logger.debug(
            "Novu accepted %d event(s) for workflow %s", len(events), self._workflow_id
        )
