#!/usr/bin/env python3
import csv
import os
import uuid
from pathlib import Path
from typing import Iterable, List, Optional

from logger import setup_logger

logger = setup_logger('db')

SUBJECTS_KEY = 'subjects'
SESSIONS_KEY = 'study-sessions'


class PersistenceError(Exception):
    """Raised when a store cannot read or write a collection."""


class LocalStore:
    """CSV-based list storage. Each key is persisted to <key>.csv under the data directory."""

    def __init__(self, data_dir: Optional[Path] = None):
        if data_dir is None:
            data_dir = Path.home() / '.local/share/study-dashboard'
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        key = (key or '').strip()
        if not key or '/' in key or '\\' in key or key.startswith('.'):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.data_dir / f"{key}.csv"

    def load_list(self, key: str) -> List[dict]:
        """Read all rows for `key` in file order. A missing file is an empty list."""
        path = self.path_for(key)
        if not path.exists():
            return []
        try:
            with path.open(mode='r', newline='') as f:
                reader = csv.DictReader(f)
                return [dict(row) for row in reader if row]
        except (OSError, csv.Error) as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

    def save_list(self, key: str, items: Iterable[dict]):
        """Replace the whole collection for `key`."""
        path = self.path_for(key)
        rows = [dict(item) for item in items]
        fieldnames = []
        for row in rows:
            for col in row:
                if col not in fieldnames:
                    fieldnames.append(col)
        tmp_path = path.with_name(path.name + '.tmp')
        try:
            with tmp_path.open(mode='w', newline='') as f:
                writer = csv.DictWriter(f, fieldnames=fieldnames, restval='')
                writer.writeheader()
                writer.writerows(rows)
            os.replace(tmp_path, path)
        except (OSError, csv.Error) as e:
            raise PersistenceError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Saved {len(rows)} row(s) to {path.name}")

    @staticmethod
    def generate_id() -> str:
        return uuid.uuid4().hex
