"""Human readable relative times for achievement and entry lists"""

from datetime import datetime
from typing import Union

from hara.utils.clock import ensure_aware


def format_time_ago(instant: Union[datetime, str], now: datetime) -> str:
    """
    Describe how long ago ``instant`` happened

    Examples:
        12 minutes ago  -> "Just now"
        5 hours ago     -> "5h ago"
        30 hours ago    -> "Yesterday"
        3 days ago      -> "3 days ago"
        older           -> "10/4/2026"
    """
    if isinstance(instant, str):
        instant = datetime.fromisoformat(instant.replace("Z", "+00:00"))
    instant = ensure_aware(instant)
    now = ensure_aware(now)

    diff_mins = int((now - instant).total_seconds() // 60)
    diff_hours = diff_mins // 60
    diff_days = diff_hours // 24

    if diff_mins < 60:
        return "Just now"
    if diff_hours < 24:
        return f"{diff_hours}h ago"
    if diff_days == 1:
        return "Yesterday"
    if diff_days < 7:
        return f"{diff_days} days ago"
    local = instant.astimezone(now.tzinfo)
    return f"{local.month}/{local.day}/{local.year}"
