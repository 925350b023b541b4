"""Best-effort hours extraction from free-text task durations.

Grammar (case-insensitive):
    <number> h...   -> hours      ("2 hours", "1.5 hr", "3h")
    <number> m...   -> minutes    ("30 mins", "45m")
    <number>        -> hours, only when the whole string is a number
Hour and minute matches add up ("1h 30m" -> 1.5). Anything that yields
zero falls back to one hour.
"""

import re

_HOURS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*h")
_MINUTES_RE = re.compile(r"(\d+(?:\.\d+)?)\s*m")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")

FALLBACK_HOURS = 1.0


def parse_duration(duration: str | None) -> float:
    """Return the duration in hours, never raising."""
    text = (duration or "").lower().strip()

    hours = 0.0
    hour_match = _HOURS_RE.search(text)
    minute_match = _MINUTES_RE.search(text)
    if hour_match:
        hours += float(hour_match.group(1))
    if minute_match:
        hours += float(minute_match.group(1)) / 60

    if hours == 0 and _NUMBER_RE.fullmatch(text):
        hours = float(text)

    if hours == 0:
        hours = FALLBACK_HOURS
    return hours
