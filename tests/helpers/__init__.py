"""Test helper utilities for Food Journal tests."""

from .fakes import RecordingConfirm, StubImageSource, make_gateway, register_user

__all__ = ["RecordingConfirm", "StubImageSource", "make_gateway", "register_user"]
