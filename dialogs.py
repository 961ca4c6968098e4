#!/usr/bin/env python3
from PyQt5.QtWidgets import QDialog, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QLineEdit, QListWidget, QListWidgetItem, QMessageBox
from PyQt5.QtGui import QColor
from PyQt5.QtCore import Qt

from db import PersistenceError
from subjects import SubjectCatalog


class InputDialog(QDialog):
    def __init__(self, parent=None, title="Input", label="Enter text:", text=""):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setMinimumWidth(360)
        # Use native system theme - no custom styling
        layout = QVBoxLayout()
        layout.setSpacing(12)
        layout.setContentsMargins(16, 16, 16, 16)

        layout.addWidget(QLabel(label))
        self.text_input = QLineEdit()
        self.text_input.setText(text)
        layout.addWidget(self.text_input)

        button_layout = QHBoxLayout()
        button_layout.addStretch()
        ok_btn = QPushButton("OK")
        ok_btn.setDefault(True)
        ok_btn.clicked.connect(self.accept)
        button_layout.addWidget(ok_btn)
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        button_layout.addWidget(cancel_btn)
        layout.addLayout(button_layout)

        self.setLayout(layout)

    def get_text(self):
        return self.text_input.text().strip()


class SubjectsDialog(QDialog):
    """Add, rename and remove subjects. Changes are written immediately."""

    def __init__(self, parent=None, catalog: SubjectCatalog = None, title="Subjects"):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setMinimumWidth(420)
        self.catalog = catalog

        layout = QVBoxLayout(); layout.setSpacing(10); layout.setContentsMargins(16, 16, 16, 16)
        layout.addWidget(QLabel("Subjects study time is attributed to:"))

        self.subjects_list = QListWidget(); self.subjects_list.setMinimumHeight(200)
        layout.addWidget(self.subjects_list)

        add_row = QHBoxLayout(); add_row.setSpacing(8)
        self.new_subject_input = QLineEdit(); self.new_subject_input.setPlaceholderText("Add subject and press +")
        self.new_subject_input.returnPressed.connect(self._add_subject)
        add_btn = QPushButton("+"); add_btn.setFixedWidth(32); add_btn.clicked.connect(self._add_subject)
        rename_btn = QPushButton("Rename"); rename_btn.clicked.connect(self._rename_selected)
        del_btn = QPushButton("Remove Selected"); del_btn.clicked.connect(self._remove_selected)
        add_row.addWidget(self.new_subject_input, 1); add_row.addWidget(add_btn)
        add_row.addWidget(rename_btn); add_row.addWidget(del_btn)
        layout.addLayout(add_row)

        btns = QHBoxLayout(); btns.addStretch()
        close_btn = QPushButton("Close"); close_btn.setDefault(True); close_btn.clicked.connect(self.accept)
        btns.addWidget(close_btn); layout.addLayout(btns)
        self.setLayout(layout)
        self._reload()

    def _reload(self):
        self.subjects_list.clear()
        try:
            subjects = self.catalog.list()
        except PersistenceError as e:
            self._warn(str(e))
            return
        for subject in subjects:
            item = QListWidgetItem(subject.name)
            item.setData(Qt.UserRole, subject.id)
            if subject.color:
                item.setForeground(QColor(subject.color))
            self.subjects_list.addItem(item)

    def _add_subject(self):
        name = self.new_subject_input.text().strip()
        if not name:
            return
        try:
            self.catalog.add(name)
        except (ValueError, PersistenceError) as e:
            self._warn(str(e))
            return
        self.new_subject_input.clear()
        self._reload()

    def _rename_selected(self):
        selected = self.subjects_list.selectedItems()
        if not selected:
            return
        item = selected[0]
        dialog = InputDialog(self, "Rename Subject", "New name:", text=item.text())
        if dialog.exec_() != dialog.Accepted:
            return
        try:
            self.catalog.rename(item.data(Qt.UserRole), dialog.get_text())
        except (ValueError, PersistenceError) as e:
            self._warn(str(e))
            return
        self._reload()

    def _remove_selected(self):
        try:
            for item in self.subjects_list.selectedItems():
                self.catalog.remove(item.data(Qt.UserRole))
        except PersistenceError as e:
            self._warn(str(e))
        self._reload()

    def _warn(self, message: str):
        QMessageBox.warning(self, "Subjects", message)
