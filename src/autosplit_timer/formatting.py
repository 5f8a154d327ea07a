"""Time formatting for the timer display."""

from __future__ import annotations


def _parts(seconds: float) -> tuple[str, int, int, int, int]:
    sign = "-" if seconds < 0 else ""
    total_ms = int(abs(seconds) * 1000)
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return sign, hours, minutes, secs, millis


def format_split_time(seconds: float | None) -> str:
    """``m:ss.cc`` or ``h:mm:ss.cc``; ``-`` when there is no time."""

    if seconds is None:
        return "-"
    sign, hours, minutes, secs, millis = _parts(seconds)
    if hours:
        return f"{sign}{hours}:{minutes:02}:{secs:02}.{millis // 10:02}"
    return f"{sign}{minutes}:{secs:02}.{millis // 10:02}"


def format_timer(seconds: float | None) -> str:
    """Main clock: ``s.mmm``, ``m:ss.mmm`` or ``h:mm:ss.mmm``."""

    if seconds is None:
        return "0.000"
    sign, hours, minutes, secs, millis = _parts(seconds)
    if hours:
        return f"{sign}{hours}:{minutes:02}:{secs:02}.{millis:03}"
    if minutes:
        return f"{sign}{minutes}:{secs:02}.{millis:03}"
    return f"{sign}{secs}.{millis:03}"


def format_delta(value: float) -> str:
    return f"+{value:.2f}" if value >= 0 else f"{value:.2f}"


__all__ = ["format_delta", "format_split_time", "format_timer"]
