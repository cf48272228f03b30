"""Shared pytest fixtures."""

import pytest

from food_journal.logging.context import clear_log_context

ENV_VARS = ("LOG_LEVEL", "FOOD_JOURNAL_DATABASE_URL", "ENVIRONMENT")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run in an empty directory with none of the app's variables set."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_log_context():
    yield
    clear_log_context()
