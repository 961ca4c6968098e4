#!/usr/bin/env python3
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal, pyqtSlot

from clock import Clock, compute_seconds
from db import PersistenceError
from models import DEFAULT_POMODORO_MINUTES, GENERAL_SUBJECT_ID, StudySession, TimerMode, TimerState
from recorder import SessionRecorder
from ticker import create_ticker
from logger import setup_logger

logger = setup_logger('timer')


class StudyTimer(QObject):
    """Stopwatch / pomodoro timer driven by an absolute start reference.

    The displayed seconds are always derived from the start reference and the
    clock, never accumulated from ticks, so missed ticks are recovered by
    resync(). Finished and stopped intervals are handed to the recorder.
    """

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(str)  # 'idle', 'running', 'paused', 'completed'
    completed = pyqtSignal()
    session_saved = pyqtSignal(object)
    save_failed = pyqtSignal(str)

    def __init__(self, recorder: SessionRecorder, ticker=None, clock: Clock = None,
                 mode: TimerMode = TimerMode.STOPWATCH,
                 pomodoro_minutes: int = DEFAULT_POMODORO_MINUTES, parent=None):
        super().__init__(parent)
        if pomodoro_minutes <= 0:
            raise ValueError("Pomodoro duration must be positive")
        self.recorder = recorder
        self.clock = clock or Clock()
        self.ticker = ticker if ticker is not None else create_ticker(self.clock)
        self.ticker.tick.connect(self._on_tick)
        self.ticker.completed.connect(self._on_completed)
        self.state = TimerState.fresh(mode, pomodoro_minutes * 60)

    @property
    def display_seconds(self) -> int:
        return self.state.seconds

    @property
    def is_running(self) -> bool:
        return self.state.running

    @property
    def mode(self) -> TimerMode:
        return self.state.mode

    @property
    def target_seconds(self) -> int:
        return self.state.target_duration_seconds

    @property
    def selected_subject_id(self) -> str:
        return self.state.selected_subject_id

    def select_subject(self, subject_id: str):
        self.state.selected_subject_id = subject_id or GENERAL_SUBJECT_ID

    def start(self) -> bool:
        state = self.state
        if state.running:
            return False
        if state.mode is TimerMode.POMODORO and state.seconds <= 0:
            # A completed pomodoro stays finished until reset()
            return False
        state.start_reference = self.clock.now_ms() - state.consumed_ms
        state.running = True
        self.ticker.start(state.start_reference, state.mode, state.target_duration_seconds)
        logger.debug(f"Started {state.mode.value} at {state.seconds}s")
        self.state_changed.emit('running')
        return True

    def pause(self) -> bool:
        if not self.state.running:
            return False
        now = self.clock.now_ms()
        self.resync(now)
        if not self.state.running:
            # resync() found the pomodoro finished
            return False
        self.state.consumed_ms = max(0, now - self.state.start_reference)
        self._halt()
        logger.debug(f"Paused at {self.state.seconds}s")
        self.state_changed.emit('paused')
        return True

    def reset(self) -> Optional[StudySession]:
        """Stop and restore the initial display, recording the interval if it was running."""
        consumed = 0
        if self.state.running:
            self.resync()
            if self.state.running:
                consumed = self.state.consumed_seconds()
        self._reinitialize()
        return self._record(consumed)

    def save_and_reset(self) -> Optional[StudySession]:
        """Record the stopwatch time so far and reset to zero, running or not."""
        if self.state.mode is not TimerMode.STOPWATCH:
            return None
        if self.state.running:
            self.resync()
        elapsed = self.state.seconds
        if elapsed <= 0:
            return None
        self._reinitialize()
        return self._record(elapsed)

    def resync(self, now: int = None) -> int:
        """Recompute the display from the start reference, completing a finished pomodoro."""
        state = self.state
        if not state.running or state.start_reference is None:
            return state.seconds
        if now is None:
            now = self.clock.now_ms()
        state.seconds = compute_seconds(state.mode, state.start_reference, now, state.target_duration_seconds)
        self.ticker.sync(state.seconds)
        self.tick.emit(state.seconds)
        if state.mode is TimerMode.POMODORO and state.seconds <= 0:
            self._complete()
        return state.seconds

    def set_mode(self, mode: TimerMode) -> bool:
        if mode is self.state.mode:
            return False
        self._reconfigure(mode, self.state.target_duration_seconds)
        return True

    def set_pomodoro_minutes(self, minutes: int) -> bool:
        if minutes <= 0:
            raise ValueError("Pomodoro duration must be positive")
        if minutes * 60 == self.state.target_duration_seconds:
            return False
        self._reconfigure(self.state.mode, minutes * 60)
        return True

    def dispose(self):
        self._halt()
        self.ticker.shutdown()

    def _reconfigure(self, mode: TimerMode, target_seconds: int):
        # A configuration change discards a running interval without saving it
        if self.state.running:
            logger.info(f"Discarding running {self.state.mode.value} interval on reconfiguration")
        self._halt()
        self.state = TimerState.fresh(mode, target_seconds, self.state.selected_subject_id)
        self.tick.emit(self.state.seconds)
        self.state_changed.emit('idle')

    def _reinitialize(self):
        self._halt()
        state = self.state
        state.consumed_ms = 0
        state.seconds = state.target_duration_seconds if state.mode is TimerMode.POMODORO else 0
        self.tick.emit(state.seconds)
        self.state_changed.emit('idle')

    def _halt(self):
        self.state.running = False
        self.state.start_reference = None
        self.ticker.stop()

    def _complete(self):
        if not self.state.running:
            return
        self._halt()
        self.state.seconds = 0
        self.state.consumed_ms = 0
        logger.info(f"Pomodoro of {self.state.target_duration_seconds}s completed")
        self.tick.emit(0)
        self.state_changed.emit('completed')
        self.completed.emit()
        self._record(self.state.target_duration_seconds)

    def _record(self, duration_seconds: int) -> Optional[StudySession]:
        session = self.recorder.record(duration_seconds, self.state.selected_subject_id)
        if session is not None:
            self.session_saved.emit(session)
        return session

    @pyqtSlot(int)
    def _on_tick(self, seconds):
        if not self.state.running:
            return
        self.state.seconds = max(0, seconds)
        self.tick.emit(self.state.seconds)
        if self.state.mode is TimerMode.POMODORO and self.state.seconds <= 0:
            self._complete_from_event()

    @pyqtSlot()
    def _on_completed(self):
        if self.state.running and self.state.mode is TimerMode.POMODORO:
            self._complete_from_event()

    def _complete_from_event(self):
        try:
            self._complete()
        except PersistenceError as e:
            logger.error(f"Failed to save completed session: {e}")
            self.save_failed.emit(str(e))
