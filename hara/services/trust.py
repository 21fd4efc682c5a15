"""
Trust score and weekly statistics

Derived on every read from the entry log; nothing here is persisted.
"""

from datetime import datetime, timedelta
from typing import Dict, Iterable, List

from hara.models.entry import BaseEntry


def trust_score(entries: Iterable[BaseEntry]) -> int:
    """
    Percentage of decision-bearing check-ins where the gut was honored

    Every entry that carries a will-you-ignore answer counts toward the
    total, an empty answer included. Returns 0 when there are none.
    """
    total_decisions = 0
    honored = 0
    for entry in entries:
        if not entry.answered_ignore:
            continue
        total_decisions += 1
        if entry.honored:
            honored += 1

    if total_decisions == 0:
        return 0
    return int(honored / total_decisions * 100 + 0.5)


def trust_message(score: int) -> str:
    """Encouragement shown next to the trust score"""
    if score >= 70:
        return "You're honoring your gut feelings consistently. Keep it up!"
    if score >= 40:
        return "You're building trust with your intuition. Stay curious."
    if score > 0:
        return "Every time you honor your gut, you build more trust."
    return "Start tracking decisions to see your trust score grow."


def week_stats(entries: Iterable[BaseEntry], now: datetime) -> Dict[str, int]:
    """
    Check-in counts for the last 7 days

    Returns:
        {
            'checkins': int,
            'honored': int,
            'decisions': int
        }
    """
    one_week_ago = now - timedelta(days=7)
    recent: List[BaseEntry] = [e for e in entries if e.timestamp >= one_week_ago]
    return {
        "checkins": len(recent),
        "honored": sum(1 for e in recent if e.honored),
        "decisions": sum(1 for e in recent if e.decision),
    }
