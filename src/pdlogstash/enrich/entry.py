"""Log entry enrichment."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pdlogstash.enrich.extract import extract_service_name
from pdlogstash.enrich.timing import seconds_since_incident_creation, which_shift

PIPELINE_TAG = "pagerduty"


class MalformedEntryError(ValueError):
    """Raised when a log entry is missing the fields enrichment depends on."""


def _require(mapping: Mapping[str, Any], key: str, entry_id: Any) -> Any:
    value = mapping.get(key)
    if value is None:
        raise MalformedEntryError(f"Log entry {entry_id!r} is missing {key!r}")
    return value


def enrich_log_entry(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``raw`` with ``tags`` and ``custom`` fields attached."""
    entry_id = raw.get("id")
    incident = _require(raw, "incident", entry_id)
    if not isinstance(incident, Mapping):
        raise MalformedEntryError(f"Log entry {entry_id!r} has a non-object incident")

    incident_created_at = _require(incident, "created_at", entry_id)
    entry_created_at = _require(raw, "created_at", entry_id)

    try:
        elapsed = seconds_since_incident_creation(incident_created_at, entry_created_at)
        shift = which_shift(incident_created_at)
    except (TypeError, ValueError) as exc:
        raise MalformedEntryError(f"Log entry {entry_id!r} has an invalid timestamp: {exc}") from exc

    enriched = dict(raw)
    enriched["tags"] = [PIPELINE_TAG]
    existing = raw.get("custom")
    custom = dict(existing) if isinstance(existing, Mapping) else {}
    custom["seconds_since_incident_creation"] = elapsed
    custom["oncall_shift"] = shift
    custom["service_name.extracted"] = extract_service_name(incident.get("description"))
    enriched["custom"] = custom
    return enriched
