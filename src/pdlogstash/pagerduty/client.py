"""PagerDuty REST API v2 client for the log entries endpoint."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from pdlogstash.config import settings

logger = structlog.get_logger()

LOG_ENTRIES_PATH = "/log_entries"
ACCEPT_HEADER = "application/vnd.pagerduty+json;version=2"
INCLUDES = ("incidents", "services", "channels", "teams")


class PagerDutyError(RuntimeError):
    """Raised when a log entries page cannot be fetched or decoded."""


class PagerDutyProtocolError(PagerDutyError):
    """Raised when a response body does not have the documented shape."""


@dataclass(frozen=True)
class TimeRange:
    since: str
    until: str


@dataclass(frozen=True)
class LogEntriesPage:
    log_entries: list[dict[str, Any]]
    more: bool
    offset: int | None = None


def build_headers(api_key: str) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Accept": ACCEPT_HEADER,
        "Authorization": f"Token token={api_key}",
    }


def build_query(time_range: TimeRange, limit: int, offset: int) -> list[tuple[str, str | int]]:
    params: list[tuple[str, str | int]] = [
        ("time_zone", "UTC"),
        ("limit", limit),
        ("since", time_range.since),
        ("until", time_range.until),
        ("offset", offset),
        ("is_overview", "false"),
    ]
    params.extend(("include[]", name) for name in INCLUDES)
    return params


def parse_page(body: Any) -> LogEntriesPage:
    """Validate a decoded response body and wrap it in a LogEntriesPage."""
    if not isinstance(body, dict):
        raise PagerDutyProtocolError("Response body is not a JSON object")

    entries = body.get("log_entries")
    if not isinstance(entries, list):
        raise PagerDutyProtocolError("Response body has no 'log_entries' array")

    more = body.get("more", False)
    if not isinstance(more, bool):
        raise PagerDutyProtocolError(f"Response 'more' is not a boolean: {more!r}")

    offset = body.get("offset")
    if more and not isinstance(offset, int):
        raise PagerDutyProtocolError("Response reports more pages but carries no offset")

    return LogEntriesPage(log_entries=entries, more=more, offset=offset)


class LogEntriesClient:
    """Single best-effort GET per page; errors propagate to the caller."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        client: httpx.Client | None = None,
    ):
        if not api_key:
            raise PagerDutyError("Missing PagerDuty API key")
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=base_url or settings.pagerduty_base_url,
            timeout=timeout_seconds or settings.pagerduty_timeout_seconds,
        )
        self._headers = build_headers(api_key)

    def fetch_page(self, time_range: TimeRange, *, limit: int, offset: int) -> LogEntriesPage:
        params = build_query(time_range, limit, offset)
        try:
            response = self._client.get(LOG_ENTRIES_PATH, params=params, headers=self._headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error("PagerDuty returned an error status", status=status, offset=offset)
            raise PagerDutyError(f"HTTP {status} from {LOG_ENTRIES_PATH}") from exc
        except httpx.RequestError as exc:
            logger.error("PagerDuty request failed", error=str(exc), offset=offset)
            raise PagerDutyError(f"Request to {LOG_ENTRIES_PATH} failed: {exc}") from exc

        try:
            body = response.json()
        except json.JSONDecodeError as exc:
            raise PagerDutyError(f"Invalid JSON: {exc}") from exc

        return parse_page(body)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> LogEntriesClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
