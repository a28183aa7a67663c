"""
Shared fixtures for dtresolve tests.

The wall clock is pinned through ``dtresolve.clock.now`` and the ambient
local zone through ``dtresolve.timezones.local_zone``.
"""
import logging
from datetime import datetime

import pytest
from dateutil import tz as dateutil_tz

from dtresolve import clock, timezones
from dtresolve.config import config
from dtresolve.timezones import UTC

# Friday, 2024-03-15 12:20:30.123456 UTC (after the US DST switch on 03-10)
FIXED_NOW = datetime(2024, 3, 15, 12, 20, 30, 123456, tzinfo=UTC)

# Stand-in local zone, distinct from UTC
LOCAL_ZONE = dateutil_tz.tzoffset("LOCAL", 9 * 3600)


@pytest.fixture(autouse=True)
def reset_default_zone():
    """Every test starts and ends with the configured default zone.

    The CLI reloads the global config from the environment, so its settings
    are restored before the default zone is reset.
    """
    settings = dict(config.__dict__)
    timezones.reset_default_time_zone()
    yield
    config.__dict__.update(settings)
    timezones.reset_default_time_zone()


@pytest.fixture(autouse=True)
def restore_package_logger():
    """The CLI reconfigures the package logger; undo that for caplog."""
    logger = logging.getLogger("dtresolve")
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def frozen_now(monkeypatch):
    """Pin the current instant to FIXED_NOW."""
    def fake_now(tz=UTC):
        return FIXED_NOW.astimezone(tz)

    monkeypatch.setattr(clock, "now", fake_now)
    return FIXED_NOW


@pytest.fixture
def local_zone(monkeypatch):
    """Pin the ambient local zone to UTC+09:00."""
    monkeypatch.setattr(timezones, "local_zone", lambda: LOCAL_ZONE)
    return LOCAL_ZONE
