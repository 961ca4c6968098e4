#!/usr/bin/env python3
"""
Centralized logging for the study dashboard.

Every module logs to one daily file under <data dir>/logs/ at DEBUG and to
the console at DASHBOARD_LOG_LEVEL (INFO by default). The data dir is
DASHBOARD_DATA_DIR or ~/.local/share/study-dashboard.
"""

import logging
import os
from datetime import date
from pathlib import Path

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_DATEFMT = '%Y-%m-%d %H:%M:%S'
CONSOLE_FORMAT = '%(message)s'


def log_dir() -> Path:
    base = os.getenv('DASHBOARD_DATA_DIR') or str(Path.home() / '.local/share/study-dashboard')
    return Path(base).expanduser() / 'logs'


def log_file(day: date = None) -> Path:
    """Log file for `day` (today by default)."""
    day = day or date.today()
    return log_dir() / f"dashboard_{day.strftime('%Y%m%d')}.log"


def console_level() -> int:
    level = logging.getLevelName(os.getenv('DASHBOARD_LOG_LEVEL', 'INFO').strip().upper())
    # getLevelName returns a string for unknown names
    return level if isinstance(level, int) else logging.INFO


def setup_logger(name: str, level=logging.DEBUG) -> logging.Logger:
    """Return the named logger, attaching the file and console handlers once."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    path = log_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(path)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level())
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
    return logger
