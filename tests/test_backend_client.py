from __future__ import annotations

import json
from dataclasses import replace

import httpx
import pytest

from pharmacy_worklist.clients.backend import BackendClient
from pharmacy_worklist.exceptions import WorklistLoadError
from pharmacy_worklist.utils.config import Config


def _client(config: Config, handler) -> BackendClient:
    http = httpx.AsyncClient(base_url=config.api_base, transport=httpx.MockTransport(handler))
    return BackendClient(config, client=http)


@pytest.mark.asyncio
class TestFetchItems:
    async def test_returns_records(self, config: Config, record) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/prescriptions"
            return httpx.Response(200, json=[record(1), record(2)])

        items = await _client(config, handler).fetch_items()
        assert [r["id"] for r in items] == [1, 2]

    async def test_http_error_is_load_error(self, config: Config) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        with pytest.raises(WorklistLoadError):
            await _client(config, handler).fetch_items()

    async def test_transport_error_is_load_error(self, config: Config) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(WorklistLoadError):
            await _client(config, handler).fetch_items()

    async def test_invalid_json_is_load_error(self, config: Config) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>")

        with pytest.raises(WorklistLoadError):
            await _client(config, handler).fetch_items()

    async def test_non_list_is_load_error(self, config: Config) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"error": "nope"})

        with pytest.raises(WorklistLoadError):
            await _client(config, handler).fetch_items()


@pytest.mark.asyncio
class TestSendIntent:
    async def test_posts_to_command_url(self, config: Config) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(204)

        config = replace(config, command_url="http://backend.test/api/queue/events")
        await _client(config, handler).send_intent(
            {"type": "move-item", "payload": {"id": 1, "pharmacyState": "prepared"}}
        )

        assert requests[0].method == "POST"
        assert json.loads(requests[0].content) == {
            "event": "move-item",
            "data": {"id": 1, "pharmacyState": "prepared"},
        }

    async def test_error_status_raises(self, config: Config) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        config = replace(config, command_url="http://backend.test/api/queue/events")
        with pytest.raises(httpx.HTTPStatusError):
            await _client(config, handler).send_intent({"type": "move-item", "payload": {}})

    async def test_without_command_url_nothing_is_sent(self, config: Config) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("should not be called")

        await _client(config, handler).send_intent({"type": "join", "payload": {}})
