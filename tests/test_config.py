from pathlib import Path

import pytest

from config import load_settings

ENV_VARS = (
    'DASHBOARD_STORAGE', 'DASHBOARD_API_URL', 'DASHBOARD_BACKGROUND_TICKER', 'DASHBOARD_POMODORO_MINUTES',
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        # set first so monkeypatch also undoes whatever load_dotenv writes
        monkeypatch.setenv(name, 'unset')
        monkeypatch.delenv(name)
    monkeypatch.setenv('DASHBOARD_DATA_DIR', str(tmp_path))


def test_defaults(tmp_path):
    settings = load_settings()

    assert settings.data_dir == Path(tmp_path)
    assert settings.storage == 'local'
    assert settings.background_ticker is True
    assert settings.pomodoro_minutes == 25


def test_env_file_is_loaded(tmp_path):
    env_file = tmp_path / '.env'
    env_file.write_text(
        'DASHBOARD_STORAGE=rest\n'
        'DASHBOARD_API_URL=http://localhost:5000/api/\n'
        'DASHBOARD_BACKGROUND_TICKER=0\n'
        'DASHBOARD_POMODORO_MINUTES=45\n'
    )

    settings = load_settings(env_file)

    assert settings.storage == 'rest'
    assert settings.api_url == 'http://localhost:5000/api'
    assert settings.background_ticker is False
    assert settings.pomodoro_minutes == 45


def test_rest_without_url_falls_back_to_local(monkeypatch):
    monkeypatch.setenv('DASHBOARD_STORAGE', 'rest')
    assert load_settings().storage == 'local'


@pytest.mark.parametrize('value', ['abc', '0', '-3'])
def test_bad_pomodoro_minutes_use_default(monkeypatch, value):
    monkeypatch.setenv('DASHBOARD_POMODORO_MINUTES', value)
    assert load_settings().pomodoro_minutes == 25


def test_unknown_values_use_defaults(monkeypatch):
    monkeypatch.setenv('DASHBOARD_STORAGE', 'mongo')
    monkeypatch.setenv('DASHBOARD_BACKGROUND_TICKER', 'maybe')

    settings = load_settings()

    assert settings.storage == 'local'
    assert settings.background_ticker is True
