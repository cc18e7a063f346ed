"""Fetch, enrich and forward PagerDuty log entries to Logstash."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import structlog

from pdlogstash.config import settings
from pdlogstash.enrich.entry import enrich_log_entry
from pdlogstash.outbound.udp_sender import Transmitter
from pdlogstash.pagerduty.client import LogEntriesClient, LogEntriesPage, PagerDutyProtocolError, TimeRange
from pdlogstash.pipeline.queue import EntryQueue

logger = structlog.get_logger()


def default_time_range(now: datetime | None = None, lookback_hours: float | None = None) -> TimeRange:
    """Window ending now and starting ``lookback_hours`` earlier, as RFC 3339."""
    if lookback_hours is None:
        lookback_hours = settings.default_lookback_hours
    now = now or datetime.now(UTC)
    since = now - timedelta(hours=lookback_hours)
    return TimeRange(
        since=since.isoformat(timespec="seconds"),
        until=now.isoformat(timespec="seconds"),
    )


class ForwardRun:
    """One pass over a time range: owns the offset cursor and the send queue."""

    def __init__(
        self,
        client: LogEntriesClient,
        transmitter: Transmitter,
        *,
        page_size: int | None = None,
        send_delay_seconds: float | None = None,
        sleep_fn: Callable[[float], None] = time.sleep,
    ):
        self._client = client
        self._transmitter = transmitter
        self.page_size = page_size or settings.pagerduty_page_size
        self.send_delay_seconds = (
            settings.send_delay_seconds if send_delay_seconds is None else send_delay_seconds
        )
        self._sleep = sleep_fn
        self.queue = EntryQueue()
        self.offset = 0
        self.stats = {"pages": 0, "fetched": 0, "sent": 0, "dropped": 0}

    def drain(self) -> None:
        """Send every queued entry, pausing after each one."""
        while not self.queue.is_empty():
            entry = self.queue.pop()
            if self._transmitter.send(entry):
                self.stats["sent"] += 1
            else:
                self.stats["dropped"] += 1
            self._sleep(self.send_delay_seconds)

    def _enqueue_page(self, page: LogEntriesPage) -> None:
        for raw in page.log_entries:
            self.queue.push(enrich_log_entry(raw))
        self.stats["pages"] += 1
        self.stats["fetched"] += len(page.log_entries)

    def _advance(self, page: LogEntriesPage) -> None:
        if page.offset is None:
            raise PagerDutyProtocolError("Response reports more pages but carries no offset")
        next_offset = page.offset + self.page_size
        if next_offset < self.offset:
            raise PagerDutyProtocolError(f"Offset moved backwards: {self.offset} -> {next_offset}")
        self.offset = next_offset

    def run(self, time_range: TimeRange) -> dict:
        """Page through log entries until the API reports no more.

        Returns:
            dict with counts: {pages, fetched, sent, dropped}
        """
        logger.info("Forwarding log entries", since=time_range.since, until=time_range.until)

        more = True
        while more:
            page = self._client.fetch_page(time_range, limit=self.page_size, offset=self.offset)
            logger.info("Fetched log entries page", offset=self.offset, count=len(page.log_entries), more=page.more)
            self._enqueue_page(page)
            more = page.more
            if more:
                self._advance(page)
            self.drain()
        self.drain()

        logger.info("Forwarding complete", **self.stats)
        return dict(self.stats)


def run_forward(
    time_range: TimeRange,
    *,
    api_key: str,
    transmitter: Transmitter,
    page_size: int | None = None,
    send_delay_seconds: float | None = None,
) -> dict:
    """Full pipeline run against the configured PagerDuty account."""
    stats: dict = {"since": time_range.since, "until": time_range.until, "success": False}
    with LogEntriesClient(api_key) as client:
        forward = ForwardRun(
            client,
            transmitter,
            page_size=page_size,
            send_delay_seconds=send_delay_seconds,
        )
        stats.update(forward.run(time_range))
    stats["success"] = True
    return stats
