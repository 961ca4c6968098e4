#!/usr/bin/env python3
import time
from datetime import date

from models import TimerMode


class Clock:
    """Wall clock used by the timer, the ticker and the recorder."""

    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000

    def today(self) -> str:
        """Return local date as YYYY-MM-DD string."""
        return date.today().isoformat()


def elapsed_seconds(start_reference_ms: int, now_ms: int) -> int:
    # Floor, never round: a half second must not count as a full one
    return max(0, (now_ms - start_reference_ms) // 1000)


def compute_seconds(mode: TimerMode, start_reference_ms: int, now_ms: int, target_seconds: int) -> int:
    """Displayed seconds for a running timer: elapsed for the stopwatch, remaining for pomodoro."""
    elapsed = elapsed_seconds(start_reference_ms, now_ms)
    if mode is TimerMode.POMODORO:
        return max(0, target_seconds - elapsed)
    return elapsed


def start_reference_for(mode: TimerMode, seconds: int, target_seconds: int, now_ms: int) -> int:
    """Start reference that makes `seconds` the current display at `now_ms`."""
    consumed = target_seconds - seconds if mode is TimerMode.POMODORO else seconds
    return now_ms - max(0, consumed) * 1000


def fmt_hms(seconds: int) -> str:
    """Format seconds as HH:MM:SS."""
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h:02}:{m:02}:{s:02}"
