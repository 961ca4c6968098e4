#!/usr/bin/env python3
from collections import OrderedDict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Tuple

from models import StudySession

WEEK_DAYS = 7


def _parse_day(value: str):
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def daily_minutes(sessions: Iterable[StudySession], today: str, days: int = WEEK_DAYS) -> List[Tuple[str, int]]:
    """Minutes studied per day for the last `days` days, oldest first."""
    end = date.fromisoformat(today)
    totals = OrderedDict(((end - timedelta(days=i)).isoformat(), 0) for i in reversed(range(days)))
    for s in sessions:
        if s.date in totals:
            totals[s.date] += s.duration_seconds
    return [(day, (seconds + 30) // 60) for day, seconds in totals.items()]


def weekly_total_seconds(sessions: Iterable[StudySession], today: str) -> int:
    end = date.fromisoformat(today)
    start = end - timedelta(days=WEEK_DAYS)
    total = 0
    for s in sessions:
        day = _parse_day(s.date)
        if day is not None and start <= day <= end:
            total += s.duration_seconds
    return total


def daily_average_seconds(sessions: Iterable[StudySession], today: str) -> int:
    return weekly_total_seconds(sessions, today) // WEEK_DAYS


def totals_by_subject(sessions: Iterable[StudySession]) -> Dict[str, int]:
    totals = {}
    for s in sessions:
        totals[s.subject] = totals.get(s.subject, 0) + s.duration_seconds
    return dict(sorted(totals.items(), key=lambda item: item[1], reverse=True))


def format_total(seconds: int) -> str:
    """Format seconds as e.g. '2h 5m'."""
    seconds = max(0, int(seconds))
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"
