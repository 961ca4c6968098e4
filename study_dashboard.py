#!/usr/bin/env python3
"""
Study Dashboard Timer: main entrypoint
Stopwatch / pomodoro study timer in the system tray.

Project structure:
- models.py: TimerMode, TimerState, StudySession, Subject
- clock.py: wall clock and time arithmetic
- ticker.py: ThreadedTicker, ForegroundTicker
- timer.py: StudyTimer (start/pause/reset/resync)
- recorder.py: SessionRecorder
- db.py / api.py: LocalStore (CSV), RestStore (REST)
- subjects.py, stats.py: subject catalog, weekly totals
- dialogs.py, tray.py: UI
- study_dashboard.py: Entrypoint (this file)
"""

import sys
import os
import fcntl
from pathlib import Path
from dotenv import load_dotenv

# Loaded before the project modules so DASHBOARD_DATA_DIR also moves the logs
ENV_FILE = Path(__file__).parent / '.env'
load_dotenv(dotenv_path=ENV_FILE)

from PyQt5.QtWidgets import QApplication, QSystemTrayIcon, QWidget, QVBoxLayout, QPushButton, QLabel

from api import open_store
from config import load_settings
from tray import StudyTimerTray
from logger import setup_logger

logger = setup_logger('main')


class FallbackWindow(QWidget):
    """Plain window giving access to the tray menu when no tray is available."""

    def __init__(self, tray_ref):
        super().__init__()
        self.tray_ref = tray_ref
        self.setWindowTitle("Study Timer (Fallback)")
        layout = QVBoxLayout()
        self.info = QLabel("System tray unavailable. Use this window to access the menu.")
        layout.addWidget(self.info)
        self.time_label = QLabel(tray_ref.time_action.text())
        font = self.time_label.font(); font.setPointSize(font.pointSize() * 2); self.time_label.setFont(font)
        layout.addWidget(self.time_label)
        tray_ref.timer.tick.connect(lambda _: self.time_label.setText(tray_ref.time_action.text()))
        btn = QPushButton("Open Menu")
        btn.clicked.connect(self.open_menu)
        layout.addWidget(btn)
        self.setLayout(layout)

    def open_menu(self):
        if self.tray_ref and self.tray_ref.menu:
            # Show menu centered over the window
            self.tray_ref.menu.exec_(self.mapToGlobal(self.rect().center()))


def main():
    """Main entry point: read settings, start Qt app, show tray"""
    settings = load_settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    # Single-instance lock (Linux): prevents two timers recording the same time
    lock_path = settings.data_dir / 'study_dashboard.lock'
    try:
        lock_file = open(lock_path, 'w')
        fcntl.lockf(lock_file, fcntl.LOCK_EX | fcntl.LOCK_NB)
        lock_file.write(str(os.getpid()))
        lock_file.flush()
    except OSError:
        logger.warning("Another Study Dashboard instance appears to be running. Exiting.")
        return 1

    app = QApplication(sys.argv)
    app.setApplicationName("Study Dashboard")
    app.setApplicationVersion("1.0.0")
    app.setQuitOnLastWindowClosed(False)

    store = open_store(settings)
    tray = StudyTimerTray(app, store, settings)

    fallback = None
    if not QSystemTrayIcon.isSystemTrayAvailable():
        logger.warning("System tray not available on this desktop environment. Launching fallback window.")
        fallback = FallbackWindow(tray)
        fallback.show()
    else:
        tray.show()
        tray.setVisible(True)

    logger.info("Study Dashboard started")
    logger.info(f"Storage: {settings.storage}")
    logger.info(f"Logs: {settings.data_dir / 'logs'}")

    return app.exec_()


if __name__ == '__main__':
    sys.exit(main())
