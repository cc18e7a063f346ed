"""UDP transmission of enriched log entries to Logstash."""

from __future__ import annotations

import json
import socket
from typing import Any, Protocol

import structlog
from rich.console import Console

logger = structlog.get_logger()

# Largest UDP payload over IPv4: 65535 - 8 (UDP header) - 20 (IP header)
MAX_DATAGRAM_BYTES = 65_507


class Transmitter(Protocol):
    def send(self, entry: dict[str, Any]) -> bool: ...


def serialize_entry(entry: dict[str, Any]) -> bytes:
    """Encode an entry as compact UTF-8 JSON, the datagram wire format."""
    return json.dumps(entry, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def fits_in_datagram(payload: bytes, max_bytes: int = MAX_DATAGRAM_BYTES) -> bool:
    return len(payload) <= max_bytes


def _report_oversized(entry: dict[str, Any], size_bytes: int, max_bytes: int) -> None:
    logger.warning(
        "Log entry skipped as it's too large for a datagram",
        entry_id=entry.get("id"),
        size_bytes=size_bytes,
        max_bytes=max_bytes,
        entry=json.dumps(entry, indent=2, ensure_ascii=False),
    )


class UdpTransmitter:
    """Fire-and-forget sender of one datagram per entry."""

    def __init__(
        self,
        host: str,
        port: int,
        *,
        max_bytes: int = MAX_DATAGRAM_BYTES,
        sock: socket.socket | None = None,
    ):
        self._address = (host, int(port))
        self._max_bytes = max_bytes
        self._sock = sock or socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

    @property
    def address(self) -> tuple[str, int]:
        return self._address

    def send(self, entry: dict[str, Any]) -> bool:
        payload = serialize_entry(entry)
        if not fits_in_datagram(payload, self._max_bytes):
            _report_oversized(entry, len(payload), self._max_bytes)
            return False

        self._sock.sendto(payload, self._address)
        return True

    def close(self) -> None:
        self._sock.close()

    def __enter__(self) -> UdpTransmitter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ConsoleTransmitter:
    """Dry-run stand-in that prints entries instead of sending them."""

    def __init__(self, console: Console | None = None, *, max_bytes: int = MAX_DATAGRAM_BYTES):
        self._console = console or Console()
        self._max_bytes = max_bytes

    def send(self, entry: dict[str, Any]) -> bool:
        payload = serialize_entry(entry)
        if not fits_in_datagram(payload, self._max_bytes):
            _report_oversized(entry, len(payload), self._max_bytes)
            return False
        self._console.print_json(payload.decode("utf-8"))
        return True

    def close(self) -> None:
        return None

    def __enter__(self) -> ConsoleTransmitter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
