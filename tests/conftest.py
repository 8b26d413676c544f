import asyncio
import pathlib
import sys

import pytest

p = str(pathlib.Path(__file__).resolve().parents[1])
sys.path.insert(0, p) if p not in sys.path else None

# Ensure Playwright can spawn subprocesses on Windows (needs Proactor loop policy).
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())

from app.config import get_settings  # noqa: E402

_SETTINGS_ENV = ("DEFAULT_TAX_YEAR", "BUILD_VERSION", "BUILD_SHA", "LOG_LEVEL", "TELEMETRY_LOG_DIR")


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for key in _SETTINGS_ENV:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
