"""
Timezone collaborators.

Zone lookup goes through the pytz database first. Names the database does not
know fall back to a literal policy: "utc" means UTC, anything else (including
"browser" and "local") means the ambient local zone.

The process-wide default zone starts from ``config.DEFAULT_TIME_ZONE`` and can
be replaced at runtime with ``set_default_time_zone``.
"""
import logging
import threading
from datetime import datetime, tzinfo
from typing import Any, Optional

import pytz
from dateutil import tz as dateutil_tz

from .config import config
from .config.temporal import LOCAL_ZONES, UTC_ZONE
from .data_types import ParseOptions

logger = logging.getLogger(__name__)

UTC = pytz.utc

_default_lock = threading.Lock()
_default_time_zone: str = config.DEFAULT_TIME_ZONE


# ============================================================================
# Process-wide default
# ============================================================================

def get_default_time_zone() -> str:
    """Zone used by calls that do not name one."""
    return _default_time_zone


def set_default_time_zone(name: Optional[str]) -> None:
    """
    Replace the process-wide default zone.

    Passing None (or an empty string) restores the configured default.
    """
    global _default_time_zone
    with _default_lock:
        _default_time_zone = name or config.DEFAULT_TIME_ZONE
    logger.debug("Default time zone set to %s", _default_time_zone)


def reset_default_time_zone() -> None:
    """Restore the default zone from the current configuration."""
    set_default_time_zone(None)


def get_time_zone(options: Optional[ParseOptions] = None) -> str:
    """Effective zone name for a call: the requested one, else the default."""
    if options is not None and options.time_zone:
        return options.time_zone
    return get_default_time_zone()


# ============================================================================
# Lookup
# ============================================================================

def lookup_zone(name: Any) -> Optional[tzinfo]:
    """
    Look a zone up in the timezone database.

    Returns:
        The pytz zone, or None when the name is not a known, named zone
    """
    if not isinstance(name, str) or not name:
        return None
    try:
        zone = pytz.timezone(name)
    except pytz.exceptions.UnknownTimeZoneError:
        return None
    if not getattr(zone, "zone", None):
        return None
    return zone


def local_zone() -> tzinfo:
    """The ambient local zone of the process."""
    return dateutil_tz.tzlocal()


def is_utc_literal(name: Optional[str]) -> bool:
    """True for the literal "utc", in any casing."""
    return (name or "").strip().lower() == UTC_ZONE


def zone_for(name: Optional[str]) -> tzinfo:
    """
    Map a zone name onto a tzinfo.

    Database zones win. Otherwise "utc" (any casing) is UTC and every other
    name, known alias or not, is the local zone.
    """
    zone = lookup_zone(name)
    if zone is not None:
        return zone
    if is_utc_literal(name):
        return UTC
    if (name or "").strip().lower() not in LOCAL_ZONES:
        logger.debug("Unknown time zone %r, using local zone", name)
    return local_zone()


# ============================================================================
# Localization
# ============================================================================

def localize(naive: datetime, tz: tzinfo) -> datetime:
    """Attach ``tz`` to wall-clock fields, handling pytz vs dateutil zones."""
    if naive.tzinfo is not None:
        return naive.astimezone(tz)
    if hasattr(tz, "localize"):
        # Wall times skipped by a DST gap come back shifted forward
        return tz.normalize(tz.localize(naive))
    return naive.replace(tzinfo=tz)


def normalize(aware: datetime, tz: tzinfo) -> datetime:
    """Express an absolute instant in ``tz``."""
    if hasattr(tz, "normalize"):
        return tz.normalize(aware.astimezone(tz))
    return aware.astimezone(tz)
