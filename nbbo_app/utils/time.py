"""
Clock-time helpers for second-resolution market data.

Quote and trade records carry their time as integer seconds since midnight;
these helpers convert to and from wall-clock notation and answer window
questions used by the filters.
"""

from typing import Union

SECONDS_PER_DAY = 24 * 60 * 60


def parse_clock(value: Union[int, str]) -> int:
    """
    Convert a clock value to seconds since midnight.

    Args:
        value: Integer seconds, or a "HH:MM:SS" / "HH:MM" string

    Returns:
        Seconds since midnight

    Raises:
        ValueError: If the value cannot be interpreted as a time of day
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid clock value: {value!r}")

    if isinstance(value, int):
        seconds = value
    else:
        text = str(value).strip()
        if text.isdigit():
            seconds = int(text)
        else:
            parts = text.split(":")
            if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
                raise ValueError(f"Invalid clock value: {value!r}")
            hours, minutes = int(parts[0]), int(parts[1])
            secs = int(parts[2]) if len(parts) == 3 else 0
            if minutes >= 60 or secs >= 60:
                raise ValueError(f"Invalid clock value: {value!r}")
            seconds = hours * 3600 + minutes * 60 + secs

    if seconds < 0 or seconds >= SECONDS_PER_DAY:
        raise ValueError(f"Clock value out of range: {value!r}")

    return seconds


def format_clock(seconds: int) -> str:
    """
    Format seconds since midnight as "HH:MM:SS".

    Args:
        seconds: Seconds since midnight

    Returns:
        Zero-padded clock string
    """
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def in_window(time: int, start: int, end: int) -> bool:
    """True if time falls inside the inclusive window [start, end]."""
    return start <= time <= end
