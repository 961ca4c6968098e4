#!/usr/bin/env python3
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional
import uuid

GENERAL_SUBJECT_ID = "general"
GENERAL_SUBJECT_NAME = "General"
POMODORO_PRESETS = (15, 25, 30, 45, 60)
DEFAULT_POMODORO_MINUTES = 25


class TimerMode(Enum):
    STOPWATCH = "stopwatch"
    POMODORO = "pomodoro"


@dataclass
class TimerState:
    mode: TimerMode = TimerMode.STOPWATCH
    target_duration_seconds: int = DEFAULT_POMODORO_MINUTES * 60
    seconds: int = 0
    running: bool = False
    start_reference: Optional[int] = None
    # Exact time spent before the last pause; only the display is whole seconds
    consumed_ms: int = 0
    selected_subject_id: str = GENERAL_SUBJECT_ID

    @classmethod
    def fresh(cls, mode: TimerMode, target_duration_seconds: int,
              selected_subject_id: str = GENERAL_SUBJECT_ID) -> 'TimerState':
        seconds = target_duration_seconds if mode is TimerMode.POMODORO else 0
        return cls(mode=mode, target_duration_seconds=target_duration_seconds,
                   seconds=seconds, selected_subject_id=selected_subject_id)

    def consumed_seconds(self) -> int:
        """Time already spent in the current run."""
        if self.mode is TimerMode.POMODORO:
            return max(0, self.target_duration_seconds - self.seconds)
        return self.seconds


@dataclass(frozen=True)
class StudySession:
    id: str
    subject: str
    date: str
    duration_seconds: int

    @classmethod
    def create(cls, subject: str, date: str, duration_seconds: int, session_id: str = None) -> 'StudySession':
        return cls(id=session_id or uuid.uuid4().hex, subject=subject, date=date,
                   duration_seconds=int(duration_seconds))

    def to_row(self) -> dict:
        return asdict(self)

    @classmethod
    def from_row(cls, row: dict) -> 'StudySession':
        return cls(
            id=str(row.get('id') or ''),
            subject=row.get('subject') or GENERAL_SUBJECT_NAME,
            date=row.get('date') or '',
            duration_seconds=int(float(row.get('duration_seconds') or 0)),
        )


@dataclass(frozen=True)
class Subject:
    id: str
    name: str
    color: str = ""

    def to_row(self) -> dict:
        return asdict(self)

    @classmethod
    def from_row(cls, row: dict) -> 'Subject':
        return cls(id=str(row.get('id') or ''), name=row.get('name') or '', color=row.get('color') or '')
