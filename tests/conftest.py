"""Pytest fixtures for PagerDuty-to-Logstash tests."""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from pdlogstash.pagerduty.client import LogEntriesClient, TimeRange


class FakeSocket:
    """Records datagrams instead of putting them on the wire."""

    def __init__(self) -> None:
        self.sent: list[tuple[bytes, tuple[str, int]]] = []
        self.closed = False

    def sendto(self, data: bytes, address: tuple[str, int]) -> int:
        self.sent.append((data, address))
        return len(data)

    def close(self) -> None:
        self.closed = True

    def decoded(self) -> list[dict]:
        return [json.loads(data.decode("utf-8")) for data, _ in self.sent]


@pytest.fixture
def fake_socket() -> FakeSocket:
    return FakeSocket()


@pytest.fixture
def time_range() -> TimeRange:
    return TimeRange(since="2024-03-04T13:00:00+00:00", until="2024-03-04T14:00:00+00:00")


@pytest.fixture
def make_entry() -> Callable[..., dict[str, Any]]:
    """Build a raw PagerDuty log entry."""

    def _make(
        entry_id: str = "R1",
        created_at: str = "2024-03-04T15:05:00Z",
        incident_created_at: str = "2024-03-04T15:00:00Z",
        description: str = "prod Service:auth-gateway latency high",
        **extra: Any,
    ) -> dict[str, Any]:
        entry = {
            "id": entry_id,
            "type": "trigger_log_entry",
            "summary": "Triggered through the API",
            "created_at": created_at,
            "incident": {
                "id": "PINC1",
                "type": "incident",
                "created_at": incident_created_at,
                "description": description,
            },
        }
        entry.update(extra)
        return entry

    return _make


@pytest.fixture
def scripted_api() -> Callable[[list[dict]], tuple[LogEntriesClient, list[httpx.Request]]]:
    """Serve a fixed sequence of response bodies through httpx.MockTransport."""

    def _build(bodies: list[dict]) -> tuple[LogEntriesClient, list[httpx.Request]]:
        requests: list[httpx.Request] = []
        remaining = list(bodies)

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=remaining.pop(0))

        http_client = httpx.Client(base_url="https://api.pagerduty.test", transport=httpx.MockTransport(handler))
        return LogEntriesClient("test-key", client=http_client), requests

    return _build
