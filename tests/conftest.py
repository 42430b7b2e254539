"""Root pytest configuration.

Test Structure:
    tests/
    └── unit/
        ├── keel_auth/         # JWT manager, stores, time spans, secrets
        └── keel_config/       # Settings and logging setup

Fixtures defined here are available to every test module.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from dotenv import load_dotenv

from keel_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.dev for tests (same as local development)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.dev").exists():
    load_dotenv(CONFIG_DIR / ".env.dev")
elif (CONFIG_DIR / ".env").exists():
    load_dotenv(CONFIG_DIR / ".env")


class FrozenClock:
    """Manually advanced clock for deterministic expiry tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def frozen_clock() -> FrozenClock:
    """Clock fixed at 2025-01-01T00:00:00Z."""
    return FrozenClock(datetime(2025, 1, 1, tzinfo=timezone.utc))


@pytest.fixture(scope="session", autouse=True)
def configure_app_settings():
    """Ensure settings are reloaded fresh for the test session."""
    clear_settings_cache()
    yield
    clear_settings_cache()
