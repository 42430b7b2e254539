"""Time utilities: human-readable durations and the default clock."""

import re
from datetime import datetime, timezone

from keel_auth.exceptions import InvalidTimeFormatError

_TIMESPAN_PATTERN = re.compile(r"([0-9]+)([smhd])")

_UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 60 * 60 * 24,
}


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def parse_time_to_seconds(value: str) -> int:
    """Convert a duration such as ``"15m"`` or ``"7d"`` to seconds.

    Parameters
    ----------
    value
        An unsigned integer followed by exactly one unit: ``s``, ``m``,
        ``h`` or ``d``.

    Returns
    -------
    The duration in seconds

    Raises
    ------
    InvalidTimeFormatError
        If the value does not match the duration grammar
    """
    match = _TIMESPAN_PATTERN.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise InvalidTimeFormatError(value)

    amount, unit = match.groups()
    return int(amount) * _UNIT_SECONDS[unit]


def is_valid_timespan(value: str) -> bool:
    """Check that a duration parses and is longer than zero."""
    try:
        return parse_time_to_seconds(value) > 0
    except InvalidTimeFormatError:
        return False
