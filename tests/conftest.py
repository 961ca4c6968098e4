import copy
import os
import tempfile

# Keep test logs out of the user's data directory and run Qt headless
os.environ.setdefault('DASHBOARD_DATA_DIR', tempfile.mkdtemp(prefix='study-dashboard-tests-'))
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

import pytest
from PyQt5.QtCore import QObject, pyqtSignal

from db import PersistenceError

START_MS = 1_760_000_000_000
TODAY = '2026-10-19'


class FakeClock:
    def __init__(self, now_ms=START_MS, today=TODAY):
        self.ms = now_ms
        self.day = today

    def now_ms(self):
        return self.ms

    def today(self):
        return self.day

    def advance(self, seconds):
        self.ms += int(seconds * 1000)


class FakeTicker(QObject):
    """Records control messages; tests emit tick/completed by hand."""

    tick = pyqtSignal(int)
    completed = pyqtSignal()

    def __init__(self):
        super().__init__()
        self.calls = []
        self.active = False

    def start(self, start_reference_ms, mode, target_seconds):
        self.active = True
        self.calls.append(('start', start_reference_ms, mode, target_seconds))

    def stop(self):
        self.active = False
        self.calls.append(('stop',))

    def sync(self, current_seconds):
        self.calls.append(('sync', current_seconds))

    def shutdown(self):
        self.calls.append(('shutdown',))


class MemoryStore:
    def __init__(self):
        self.data = {}
        self.saves = 0
        self._next_id = 0

    def load_list(self, key):
        return copy.deepcopy(self.data.get(key, []))

    def save_list(self, key, items):
        self.saves += 1
        self.data[key] = copy.deepcopy(list(items))

    def generate_id(self):
        self._next_id += 1
        return f"id-{self._next_id}"


class FailingStore(MemoryStore):
    def save_list(self, key, items):
        raise PersistenceError("disk full")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def fake_ticker(qapp):
    return FakeTicker()
