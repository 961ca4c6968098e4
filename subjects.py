#!/usr/bin/env python3
from typing import List, Optional

from db import SUBJECTS_KEY
from models import Subject
from logger import setup_logger

logger = setup_logger('subjects')

DEFAULT_COLORS = ('#3b82f6', '#10b981', '#f59e0b', '#ef4444', '#8b5cf6', '#ec4899', '#14b8a6')


class SubjectCatalog:
    """Subjects study time can be attributed to. Names are unique regardless of case."""

    def __init__(self, store):
        self.store = store

    def list(self) -> List[Subject]:
        return [Subject.from_row(row) for row in self.store.load_list(SUBJECTS_KEY)]

    def get(self, subject_id: str) -> Optional[Subject]:
        for subject in self.list():
            if subject.id == subject_id:
                return subject
        return None

    @staticmethod
    def _check_name(name: str, subjects: List[Subject], exclude_id: str = None) -> str:
        name = (name or '').strip()
        if not name:
            raise ValueError("Subject name cannot be empty")
        folded = name.casefold()
        for s in subjects:
            if s.id != exclude_id and s.name.casefold() == folded:
                raise ValueError(f"Subject '{name}' already exists")
        return name

    def add(self, name: str, color: str = None) -> Subject:
        subjects = self.list()
        name = self._check_name(name, subjects)
        subject = Subject(
            id=self.store.generate_id(),
            name=name,
            color=color or DEFAULT_COLORS[len(subjects) % len(DEFAULT_COLORS)],
        )
        subjects.append(subject)
        self.store.save_list(SUBJECTS_KEY, [s.to_row() for s in subjects])
        logger.info(f"Added subject '{name}'")
        return subject

    def rename(self, subject_id: str, new_name: str) -> bool:
        subjects = self.list()
        if not any(s.id == subject_id for s in subjects):
            return False
        new_name = self._check_name(new_name, subjects, exclude_id=subject_id)
        rows = []
        for s in subjects:
            if s.id == subject_id:
                s = Subject(id=s.id, name=new_name, color=s.color)
            rows.append(s.to_row())
        self.store.save_list(SUBJECTS_KEY, rows)
        logger.info(f"Renamed subject {subject_id} to '{new_name}'")
        return True

    def remove(self, subject_id: str) -> int:
        subjects = self.list()
        kept = [s for s in subjects if s.id != subject_id]
        removed = len(subjects) - len(kept)
        if removed:
            self.store.save_list(SUBJECTS_KEY, [s.to_row() for s in kept])
            logger.info(f"Removed subject {subject_id}")
        return removed
