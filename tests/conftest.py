from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from voice_memo.config import Settings

SettingsFactory = Callable[..., Settings]


def _make_settings(**overrides: Any) -> Settings:
    # Ignore any local .env so tests only see defaults, overrides and monkeypatched env.
    return Settings(_env_file=None, **overrides)  # type: ignore[call-arg]


@pytest.fixture
def make_settings() -> SettingsFactory:
    return _make_settings


@pytest.fixture
def settings() -> Settings:
    return _make_settings()
