"""Service name extraction from incident descriptions."""

import re

NOT_FOUND = "Not found for extraction"

# Alternatives are listed in priority order; at any one position the
# earliest alternative wins, but the earliest position in the text wins overall.
SERVICE_PATTERNS = (
    r"^\S+\sService:(\S+)?",
    r"^\[FIRING:.\]\s(\S+)?",
    r"^Host:\S+\sis\s(DOWN)+\s",
)
SERVICE_PATTERN = re.compile(
    "|".join(f"(?:{pattern})" for pattern in SERVICE_PATTERNS),
    re.IGNORECASE | re.MULTILINE,
)


def extract_service_name(description: str | None) -> str:
    """Pull a service name out of an alert description.

    Examples:
        "x Service:auth-gateway"     -> "auth-gateway"
        "[FIRING:2] checkout-api up" -> "checkout-api"
        "Host:db1 is DOWN "          -> "DOWN"

    A match whose capture is empty is skipped in favour of the next match.
    """
    if not isinstance(description, str) or not description:
        return NOT_FOUND

    for match in SERVICE_PATTERN.finditer(description):
        for group in match.groups():
            if group and group.strip():
                return group.strip()

    return NOT_FOUND
