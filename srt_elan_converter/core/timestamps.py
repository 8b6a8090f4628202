"""SRT timestamp parsing and formatting.

WHY: Every cue boundary in an SRT file is a clock string such as
``00:01:23,450``. The time-slot table needs exact, comparable integers, so
timestamps are converted once to milliseconds and never handled as floats.

HOW: A single anchored regex accepts two or three fractional digits. Two
digits are read as hundredths of a second and scaled by 10. Components are
range-checked against a 24-hour clock before combining.

RULES:
- Grammar: HH:MM:SS,mmm or HH:MM:SS,mm (ASCII digits, surrounding
  whitespace tolerated)
- "45" as a fraction means 450 ms, not 45 ms
- Hours 0-23, minutes 0-59, seconds 0-59, milliseconds 0-999
- Grammar violations raise TimestampFormatError, range violations raise
  TimestampRangeError
"""

from __future__ import annotations

import re

from srt_elan_converter.core.errors import TimestampFormatError, TimestampRangeError

_TIMESTAMP_RE = re.compile(r"^([0-9]{2}):([0-9]{2}):([0-9]{2}),([0-9]{2,3})$")

_MS_PER_SECOND = 1000
_MS_PER_MINUTE = 60 * _MS_PER_SECOND
_MS_PER_HOUR = 60 * _MS_PER_MINUTE


def parse_timestamp(value: object) -> int:
    """Convert an SRT timestamp into integer milliseconds since midnight.

    Args:
        value: Timestamp string, e.g. ``"00:01:23,450"`` or ``"00:01:23,45"``.

    Returns:
        Milliseconds as ``((H*3600 + M*60 + S) * 1000) + ms``.

    Raises:
        TimestampFormatError: If value is empty, not a string, or does not
            match the grammar.
        TimestampRangeError: If any component is out of range.
    """
    if not isinstance(value, str) or not value:
        raise TimestampFormatError(f"Invalid timestamp format: {value!r}")

    match = _TIMESTAMP_RE.match(value.strip())
    if match is None:
        raise TimestampFormatError(f"Invalid timestamp format: {value!r}")

    hours, minutes, seconds = (int(g) for g in match.group(1, 2, 3))
    fraction = match.group(4)
    milliseconds = int(fraction)
    if len(fraction) == 2:
        milliseconds *= 10

    if hours > 23 or minutes > 59 or seconds > 59 or milliseconds > 999:
        raise TimestampRangeError(f"Invalid timestamp values: {value!r}")

    return (hours * 3600 + minutes * 60 + seconds) * _MS_PER_SECOND + milliseconds


def format_timestamp(ms: int) -> str:
    """Render milliseconds as ``HH:MM:SS,mmm``."""
    if ms < 0:
        raise ValueError(f"Negative time value: {ms}")
    hours, rest = divmod(ms, _MS_PER_HOUR)
    minutes, rest = divmod(rest, _MS_PER_MINUTE)
    seconds, millis = divmod(rest, _MS_PER_SECOND)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{millis:03d}"
