from __future__ import annotations

import logging
from typing import Any

import httpx

from pharmacy_worklist.exceptions import WorklistLoadError
from pharmacy_worklist.utils.config import Config

logger = logging.getLogger(__name__)

PRESCRIPTIONS_PATH = "/api/prescriptions"


class BackendClient:
    """HTTP access to the hospital backend.

    ``fetch_items`` is the bulk-fetch source for the reconciler;
    ``send_intent`` is an outbound bus listener that forwards intents to
    the configured command endpoint.
    """

    def __init__(
        self,
        config: Config,
        client: httpx.AsyncClient | None = None,
    ):
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=config.api_base, timeout=config.fetch_timeout
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_items(self) -> list[dict[str, Any]]:
        try:
            response = await self._client.get(PRESCRIPTIONS_PATH)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise WorklistLoadError(f"Fetching {PRESCRIPTIONS_PATH} failed: {exc}") from exc
        except ValueError as exc:
            raise WorklistLoadError(f"Invalid JSON from {PRESCRIPTIONS_PATH}: {exc}") from exc

        if not isinstance(data, list):
            raise WorklistLoadError(
                f"Expected a list from {PRESCRIPTIONS_PATH}, got {type(data).__name__}"
            )
        return data

    async def send_intent(self, event: dict[str, Any]) -> None:
        """Forward an outbound bus event to the command endpoint."""
        if not self._config.command_url:
            logger.info("No command endpoint configured, %s not forwarded: %s", event["type"], event["payload"])
            return
        response = await self._client.post(
            self._config.command_url,
            json={"event": event["type"], "data": event["payload"]},
        )
        response.raise_for_status()
        logger.debug("Forwarded %s to %s", event["type"], self._config.command_url)
