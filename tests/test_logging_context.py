"""Tests for logging context propagation."""

import pytest

from food_journal.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


def test_empty_context():
    """Test that context starts empty."""
    assert get_log_context() == {}


def test_push_and_pop():
    """Test pushing fields and restoring with the token."""
    token = push_log_context(user_id=7, screen="journal")
    assert get_log_context() == {"user_id": 7, "screen": "journal"}

    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_push_overrides_and_restores():
    """Test an inner push can shadow a key and popping restores it."""
    outer = push_log_context(user_id=7, screen="auth")
    inner = push_log_context(screen="journal", entry_id=3)
    assert get_log_context() == {"user_id": 7, "screen": "journal", "entry_id": 3}

    pop_log_context(inner)
    assert get_log_context() == {"user_id": 7, "screen": "auth"}

    pop_log_context(outer)
    assert get_log_context() == {}


def test_context_manager_nested():
    """Test nested context managers."""
    with log_context(user_id=7):
        with log_context(entry_id=3):
            assert get_log_context() == {"user_id": 7, "entry_id": 3}

        assert get_log_context() == {"user_id": 7}

    assert get_log_context() == {}


def test_context_manager_exception():
    """Test that context is restored even when an exception escapes."""
    with pytest.raises(ValueError):
        with log_context(user_id=7):
            raise ValueError("Test exception")

    assert get_log_context() == {}


def test_context_manager_does_not_swallow_exceptions():
    """Test __exit__ lets the exception propagate."""
    manager = log_context(user_id=7)
    manager.__enter__()

    assert manager.__exit__(ValueError, ValueError("boom"), None) is False
    assert manager.token is None


def test_clear_context():
    """Test clearing all context."""
    push_log_context(user_id=7, screen="journal")

    clear_log_context()

    assert get_log_context() == {}


def test_context_isolation():
    """Test that get_log_context returns a copy, not the actual dict."""
    token = push_log_context(user_id=7)

    context = get_log_context()
    context["screen"] = "modified"

    assert get_log_context() == {"user_id": 7}
    pop_log_context(token)
