#!/usr/bin/env python3
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from models import DEFAULT_POMODORO_MINUTES
from logger import setup_logger

logger = setup_logger('config')

STORAGE_BACKENDS = ('local', 'rest')


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    storage: str = 'local'
    api_url: str = ''
    background_ticker: bool = True
    pomodoro_minutes: int = DEFAULT_POMODORO_MINUTES


def _flag(value: str, default: bool) -> bool:
    value = (value or '').strip().lower()
    if not value:
        return default
    if value in ('1', 'true', 'yes', 'on'):
        return True
    if value in ('0', 'false', 'no', 'off'):
        return False
    logger.warning(f"Unrecognized boolean '{value}', using {default}")
    return default


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Read settings from the environment, after loading `env_file` when given."""
    if env_file is not None:
        load_dotenv(dotenv_path=env_file)

    data_dir = Path(os.getenv('DASHBOARD_DATA_DIR') or Path.home() / '.local/share/study-dashboard').expanduser()

    storage = os.getenv('DASHBOARD_STORAGE', 'local').strip().lower()
    if storage not in STORAGE_BACKENDS:
        logger.warning(f"Unknown storage backend '{storage}', using local")
        storage = 'local'

    api_url = os.getenv('DASHBOARD_API_URL', '').strip().rstrip('/')
    if storage == 'rest' and not api_url:
        logger.warning("DASHBOARD_STORAGE=rest but DASHBOARD_API_URL is not set, using local")
        storage = 'local'

    minutes_raw = os.getenv('DASHBOARD_POMODORO_MINUTES', '')
    pomodoro_minutes = DEFAULT_POMODORO_MINUTES
    if minutes_raw.strip():
        try:
            pomodoro_minutes = int(minutes_raw)
        except ValueError:
            logger.warning(f"Invalid DASHBOARD_POMODORO_MINUTES '{minutes_raw}', using {DEFAULT_POMODORO_MINUTES}")
        if pomodoro_minutes <= 0:
            logger.warning(f"DASHBOARD_POMODORO_MINUTES must be positive, using {DEFAULT_POMODORO_MINUTES}")
            pomodoro_minutes = DEFAULT_POMODORO_MINUTES

    return Settings(
        data_dir=data_dir,
        storage=storage,
        api_url=api_url,
        background_ticker=_flag(os.getenv('DASHBOARD_BACKGROUND_TICKER', ''), True),
        pomodoro_minutes=pomodoro_minutes,
    )
