"""Shared FastAPI dependencies."""

from __future__ import annotations

from economy.config import ValidatorSettings

_settings: ValidatorSettings | None = None


def get_settings() -> ValidatorSettings:
    """FastAPI dependency: return the shared ValidatorSettings."""
    assert _settings is not None, "ValidatorSettings not initialised"
    return _settings
