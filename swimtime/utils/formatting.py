"""Display helpers for stopwatch readings."""

from __future__ import annotations


def format_time(ms: int) -> str:
    """Render milliseconds as ``MM:SS.cc`` (centiseconds, truncated)."""

    ms = max(0, int(ms))
    minutes = ms // 60000
    seconds = (ms % 60000) // 1000
    centis = (ms % 1000) // 10
    return f"{minutes:02d}:{seconds:02d}.{centis:02d}"


def format_delta(ms: int) -> str:
    """Render an improvement delta; positive deltas are faster and shown with a minus sign."""

    if ms > 0:
        return f"-{format_time(ms)}"
    if ms < 0:
        return f"+{format_time(-ms)}"
    return format_time(0)


__all__ = ["format_time", "format_delta"]
