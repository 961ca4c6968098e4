#!/usr/bin/env python3
"""
Tick sources for the study timer.

Both tickers recompute the displayed seconds from the absolute start
reference on every timeout, so a late or skipped timeout never loses time.
ThreadedTicker runs its QTimer on a dedicated QThread; ForegroundTicker
runs the same worker on the caller's thread and is the fallback when a
worker thread is disabled or cannot be started.
"""

from PyQt5.QtCore import QObject, QThread, QTimer, pyqtSignal, pyqtSlot

from clock import Clock, compute_seconds, start_reference_for
from models import TimerMode
from logger import setup_logger

logger = setup_logger('ticker')

TICK_INTERVAL_MS = 1000
THREAD_STOP_TIMEOUT_MS = 2000


class _TickWorker(QObject):
    tick = pyqtSignal(int, int)  # run id, seconds
    completed = pyqtSignal(int)  # run id

    def __init__(self, clock: Clock):
        super().__init__()
        self._clock = clock
        self._timer = None
        self._run_id = 0
        self._start_reference = None
        self._mode = TimerMode.STOPWATCH
        self._target = 0

    def _ensure_timer(self):
        # Created lazily so the timer lives on whichever thread the worker was moved to
        if self._timer is None:
            self._timer = QTimer(self)
            self._timer.setInterval(TICK_INTERVAL_MS)
            self._timer.timeout.connect(self._on_timeout)

    @pyqtSlot(int, object, str, int)
    def begin(self, run_id, start_reference, mode, target_seconds):
        self._ensure_timer()
        self._run_id = run_id
        self._start_reference = int(start_reference)
        self._mode = TimerMode(mode)
        self._target = target_seconds
        self._timer.start()

    @pyqtSlot()
    def halt(self):
        if self._timer is not None:
            self._timer.stop()
        self._start_reference = None

    @pyqtSlot(int, int)
    def realign(self, run_id, seconds):
        if run_id != self._run_id or self._start_reference is None:
            return
        self._start_reference = start_reference_for(self._mode, seconds, self._target, self._clock.now_ms())

    def _on_timeout(self):
        if self._start_reference is None:
            self._timer.stop()
            return
        seconds = compute_seconds(self._mode, self._start_reference, self._clock.now_ms(), self._target)
        if self._mode is TimerMode.POMODORO and seconds <= 0:
            # Schedule ends before completion is announced
            self._timer.stop()
            self._start_reference = None
            self.tick.emit(self._run_id, 0)
            self.completed.emit(self._run_id)
            return
        self.tick.emit(self._run_id, seconds)


class _Ticker(QObject):
    tick = pyqtSignal(int)
    completed = pyqtSignal()

    _begin = pyqtSignal(int, object, str, int)
    _halt = pyqtSignal()
    _realign = pyqtSignal(int, int)

    def __init__(self, clock: Clock = None, parent=None):
        super().__init__(parent)
        self._run_id = 0
        self._active = False
        self._closed = False
        self._worker = _TickWorker(clock or Clock())
        self._place_worker()
        self._begin.connect(self._worker.begin)
        self._halt.connect(self._worker.halt)
        self._realign.connect(self._worker.realign)
        self._worker.tick.connect(self._relay_tick)
        self._worker.completed.connect(self._relay_completed)

    def _place_worker(self):
        pass

    @property
    def active(self) -> bool:
        return self._active

    def start(self, start_reference_ms: int, mode: TimerMode, target_seconds: int):
        if self._closed:
            return
        self._run_id += 1
        self._active = True
        self._begin.emit(self._run_id, start_reference_ms, mode.value, int(target_seconds))

    def stop(self):
        self._active = False
        if not self._closed:
            self._halt.emit()

    def sync(self, current_seconds: int):
        if self._active and not self._closed:
            self._realign.emit(self._run_id, int(current_seconds))

    def shutdown(self):
        self.stop()
        self._closed = True

    @pyqtSlot(int, int)
    def _relay_tick(self, run_id, seconds):
        # Ticks from an earlier run or queued before stop() are dropped
        if self._active and run_id == self._run_id:
            self.tick.emit(seconds)

    @pyqtSlot(int)
    def _relay_completed(self, run_id):
        if self._active and run_id == self._run_id:
            self._active = False
            self.completed.emit()


class ForegroundTicker(_Ticker):
    """Ticks on the owner's thread. Stalls with it and relies on resync to catch up."""

    def shutdown(self):
        if self._closed:
            return
        super().shutdown()
        self._worker.deleteLater()


class ThreadedTicker(_Ticker):
    """Ticks on a dedicated QThread and talks to the owner through queued signals."""

    def _place_worker(self):
        self._thread = QThread()
        self._thread.setObjectName('study-timer-ticker')
        self._worker.moveToThread(self._thread)
        self._thread.finished.connect(self._worker.deleteLater)
        self._thread.start()
        if not self._thread.isRunning():
            raise RuntimeError("Ticker thread failed to start")

    def shutdown(self):
        if self._closed:
            return
        super().shutdown()
        self._thread.quit()
        if not self._thread.wait(THREAD_STOP_TIMEOUT_MS):
            logger.warning("Ticker thread did not stop in time")


def create_ticker(clock: Clock = None, background: bool = True, parent=None) -> _Ticker:
    """Prefer a worker-thread ticker, degrading to foreground ticking."""
    if background:
        try:
            return ThreadedTicker(clock, parent)
        except RuntimeError as e:
            logger.warning(f"Background ticker unavailable ({e}), using foreground ticking")
    else:
        logger.info("Background ticker disabled, using foreground ticking")
    return ForegroundTicker(clock, parent)
