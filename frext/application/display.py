"""Formatting helpers for showing processing results."""

from __future__ import annotations

from datetime import datetime, timezone


def format_confidence(confidence: float) -> str:
    """``0.95 -> "95.0%"``."""
    return f"{confidence * 100:.1f}%"


def _parse_timestamp(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    # naive timestamps are local time
    return dt.astimezone() if dt.tzinfo is None else dt


def relative_time(timestamp: str | datetime, now: datetime | None = None) -> str:
    """Japanese relative age of ``timestamp``: たった今, N分前, N時間前, N日前.

    Anything 30 days or older is shown as a local ``YYYY/M/D`` date.
    """
    target = _parse_timestamp(timestamp)
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.astimezone()

    seconds = (current - target).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "たった今"
    if minutes < 60:
        return f"{minutes}分前"
    if hours < 24:
        return f"{hours}時間前"
    if days < 30:
        return f"{days}日前"
    local = target.astimezone()
    return f"{local.year}/{local.month}/{local.day}"
