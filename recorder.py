#!/usr/bin/env python3
from typing import Optional

from clock import Clock
from db import SESSIONS_KEY, SUBJECTS_KEY
from models import GENERAL_SUBJECT_NAME, StudySession, Subject
from logger import setup_logger

logger = setup_logger('recorder')


class SessionRecorder:
    """Turns a finished or stopped interval into a persisted study session."""

    def __init__(self, store, clock: Clock = None):
        self.store = store
        self.clock = clock or Clock()

    def resolve_subject_name(self, subject_id: str) -> str:
        for row in self.store.load_list(SUBJECTS_KEY):
            subject = Subject.from_row(row)
            if subject.id == subject_id and subject.name:
                return subject.name
        return GENERAL_SUBJECT_NAME

    def record(self, duration_seconds: int, subject_id: str) -> Optional[StudySession]:
        """Append a session for `duration_seconds`. Non-positive durations are dropped."""
        duration_seconds = int(duration_seconds)
        if duration_seconds <= 0:
            logger.debug(f"Dropping empty session ({duration_seconds}s)")
            return None
        session = StudySession.create(
            subject=self.resolve_subject_name(subject_id),
            date=self.clock.today(),
            duration_seconds=duration_seconds,
            session_id=self.store.generate_id(),
        )
        sessions = self.store.load_list(SESSIONS_KEY)
        sessions.append(session.to_row())
        self.store.save_list(SESSIONS_KEY, sessions)
        logger.info(f"Recorded {duration_seconds}s of {session.subject} on {session.date}")
        return session
