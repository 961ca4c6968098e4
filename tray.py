#!/usr/bin/env python3
from PyQt5.QtWidgets import QSystemTrayIcon, QMenu, QAction, QActionGroup
from PyQt5.QtGui import QIcon, QCursor
from PyQt5.QtCore import Qt

from clock import Clock, fmt_hms
from config import Settings
from db import SESSIONS_KEY, PersistenceError
from dialogs import SubjectsDialog
from models import GENERAL_SUBJECT_ID, GENERAL_SUBJECT_NAME, POMODORO_PRESETS, StudySession, TimerMode
from recorder import SessionRecorder
from stats import daily_average_seconds, daily_minutes, format_total, totals_by_subject, weekly_total_seconds
from subjects import SubjectCatalog
from ticker import create_ticker
from timer import StudyTimer
from logger import setup_logger

logger = setup_logger('tray')


class StudyTimerTray(QSystemTrayIcon):
    def __init__(self, app, store, settings: Settings, clock: Clock = None, parent=None):
        super().__init__(parent)
        self.app = app
        self.store = store
        self.clock = clock or Clock()
        self.catalog = SubjectCatalog(store)
        self.timer = StudyTimer(
            SessionRecorder(store, self.clock),
            ticker=create_ticker(self.clock, background=settings.background_ticker),
            clock=self.clock,
            pomodoro_minutes=settings.pomodoro_minutes,
        )
        self.timer.tick.connect(self.on_tick)
        self.timer.state_changed.connect(self.on_state_changed)
        self.timer.session_saved.connect(self.on_session_saved)
        self.timer.completed.connect(self.on_completed)
        self.timer.save_failed.connect(self.on_save_failed)
        # Ticks missed while the app was inactive are recovered here
        self.app.applicationStateChanged.connect(self.on_application_state_changed)

        icon = QIcon.fromTheme("chronometer")
        if icon.isNull():
            icon = QIcon.fromTheme("preferences-system-time")
        self.setIcon(icon)
        self.menu = None
        self.setup_menu()
        self.activated.connect(self.on_tray_activated)
        self.refresh()

    def on_tray_activated(self, reason):
        if reason == QSystemTrayIcon.Trigger and self.menu:
            self._guarded(self.timer.resync)
            self.menu.popup(QCursor.pos())

    def setup_menu(self):
        self.menu = QMenu()
        self.time_action = QAction("00:00:00"); self.time_action.setEnabled(False)
        time_font = self.time_action.font(); time_font.setBold(True); self.time_action.setFont(time_font)
        self.menu.addAction(self.time_action)
        self.week_action = QAction("This week: 0h 0m"); self.week_action.setEnabled(False)
        self.menu.addAction(self.week_action)
        self.average_action = QAction("Daily average: 0h 0m"); self.average_action.setEnabled(False)
        self.menu.addAction(self.average_action)
        self.days_menu = self.menu.addMenu("Last 7 Days")
        self.subject_totals_menu = self.menu.addMenu("By Subject")
        self.menu.addSeparator()

        self.start_pause_action = QAction("▶️  Start"); self.start_pause_action.triggered.connect(self.start_pause)
        self.menu.addAction(self.start_pause_action)
        self.reset_action = QAction("🔄 Reset"); self.reset_action.triggered.connect(self.reset)
        self.menu.addAction(self.reset_action)
        self.save_action = QAction("💾 Save Session"); self.save_action.triggered.connect(self.save_session)
        self.menu.addAction(self.save_action)
        self.menu.addSeparator()

        # Keep references to prevent GC removing actions
        self.mode_menu = self.menu.addMenu("Mode")
        self.mode_group = QActionGroup(self.mode_menu)
        self.mode_actions = {}
        for mode, label in ((TimerMode.STOPWATCH, "Stopwatch"), (TimerMode.POMODORO, "Pomodoro")):
            action = QAction(label, self.mode_group); action.setCheckable(True)
            action.triggered.connect(lambda checked, m=mode: self.timer.set_mode(m))
            self.mode_menu.addAction(action)
            self.mode_actions[mode] = action

        self.duration_menu = self.menu.addMenu("Pomodoro Length")
        self.duration_group = QActionGroup(self.duration_menu)
        self.duration_actions = {}
        for minutes in POMODORO_PRESETS:
            action = QAction(f"{minutes}m", self.duration_group); action.setCheckable(True)
            action.triggered.connect(lambda checked, m=minutes: self.timer.set_pomodoro_minutes(m))
            self.duration_menu.addAction(action)
            self.duration_actions[minutes] = action

        self.subject_menu = self.menu.addMenu("Subject")
        self.subject_menu.aboutToShow.connect(self.rebuild_subject_menu)
        self.subject_group = QActionGroup(self.subject_menu)
        self.menu.addSeparator()

        self.subjects_action = QAction("📚 Manage Subjects…"); self.subjects_action.triggered.connect(self.open_subjects)
        self.menu.addAction(self.subjects_action)
        self.quit_action = QAction("❌ Quit"); self.quit_action.triggered.connect(self.quit_app)
        self.menu.addAction(self.quit_action)
        self.setContextMenu(self.menu)
        self.menu.aboutToShow.connect(self.refresh_progress)

    def rebuild_subject_menu(self):
        self.subject_menu.clear()
        for action in self.subject_group.actions():
            self.subject_group.removeAction(action)
            action.deleteLater()
        try:
            subjects = [(s.id, s.name) for s in self.catalog.list()]
        except PersistenceError as e:
            logger.error(f"Could not load subjects: {e}")
            subjects = []
        if not subjects:
            subjects = [(GENERAL_SUBJECT_ID, GENERAL_SUBJECT_NAME)]
        for subject_id, name in subjects:
            action = QAction(name, self.subject_group); action.setCheckable(True)
            action.setChecked(subject_id == self.timer.selected_subject_id)
            action.triggered.connect(lambda checked, sid=subject_id: self.timer.select_subject(sid))
            self.subject_menu.addAction(action)

    def start_pause(self):
        if self.timer.is_running:
            self._guarded(self.timer.pause)
        else:
            self.timer.start()

    def reset(self):
        self._guarded(self.timer.reset)

    def save_session(self):
        self._guarded(self.timer.save_and_reset)

    def _guarded(self, operation):
        try:
            operation()
        except PersistenceError as e:
            self.on_save_failed(str(e))

    def refresh(self):
        self.on_tick(self.timer.display_seconds)
        running = self.timer.is_running
        self.start_pause_action.setText("⏸️  Pause" if running else "▶️  Start")
        self.save_action.setVisible(self.timer.mode is TimerMode.STOPWATCH)
        self.save_action.setEnabled(self.timer.display_seconds > 0)
        self.mode_actions[self.timer.mode].setChecked(True)
        minutes = self.timer.target_seconds // 60
        if minutes in self.duration_actions:
            self.duration_actions[minutes].setChecked(True)
        self.duration_menu.setEnabled(self.timer.mode is TimerMode.POMODORO)

    def refresh_progress(self):
        try:
            sessions = [StudySession.from_row(r) for r in self.store.load_list(SESSIONS_KEY)]
        except PersistenceError as e:
            logger.error(f"Could not load sessions: {e}")
            return
        today = self.clock.today()
        self.week_action.setText(f"This week: {format_total(weekly_total_seconds(sessions, today))}")
        self.average_action.setText(f"Daily average: {format_total(daily_average_seconds(sessions, today))}")

        self.days_menu.clear()
        for day, minutes in daily_minutes(sessions, today):
            self.days_menu.addAction(f"{day}: {minutes}m").setEnabled(False)

        self.subject_totals_menu.clear()
        totals = totals_by_subject(sessions)
        for subject, seconds in totals.items():
            self.subject_totals_menu.addAction(f"{subject}: {format_total(seconds)}").setEnabled(False)
        self.subject_totals_menu.setEnabled(bool(totals))

    def on_tick(self, seconds):
        text = fmt_hms(seconds)
        self.time_action.setText(text)
        self.setToolTip(f"Study Timer\n{text}")
        self.save_action.setEnabled(seconds > 0)

    def on_state_changed(self, state):
        self.refresh()

    def on_application_state_changed(self, state):
        if state == Qt.ApplicationActive:
            self._guarded(self.timer.resync)

    def on_completed(self):
        self.show_notification("✅ Pomodoro Complete", "Time for a break!", 3000)

    def on_session_saved(self, session):
        self.show_notification("💾 Session Saved", f"{session.subject}: {fmt_hms(session.duration_seconds)}", 2000)

    def on_save_failed(self, message):
        logger.error(f"Session not saved: {message}")
        self.show_notification("⚠️  Save Failed", message, 4000)

    def show_notification(self, title, message, duration=2000):
        self.showMessage(title, message, QSystemTrayIcon.Information, duration)

    def open_subjects(self):
        SubjectsDialog(None, catalog=self.catalog).exec_()

    def quit_app(self):
        self.timer.dispose()
        self.hide(); self.app.quit()
