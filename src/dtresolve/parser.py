"""
Date and Time Resolver

Turns any date-like input into a single timezone-aware datetime.

Routing:
    aware datetime  → returned unchanged
    str with "now"  → relative expression engine, falling back to the
                      current instant when the expression does not evaluate
    anything else   → generic resolution in the effective zone

Generic resolution looks the zone up in the timezone database first. Names
the database does not know fall back to UTC for "utc" and to the local zone
for everything else.
"""
import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from dateutil import parser as dateutil_parser

from . import clock, datemath
from .config import config
from .config.temporal import NOW
from .data_types import Instant, ParseOptions, RawInput, is_instant
from .errors import InvalidDateTimeError, InvalidExpressionError
from .timezones import UTC, get_time_zone, localize, normalize, zone_for

logger = logging.getLogger(__name__)

OptionsInput = Union[ParseOptions, Dict[str, Any], None]

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_COMPONENT_NAMES = ("year", "month", "day", "hour", "minute", "second", "microsecond")


def resolve(value: RawInput, options: OptionsInput = None) -> Optional[Instant]:
    """
    Resolve a date and time value to an aware datetime.

    If a time zone is supplied the value is read as wall-clock time in that
    zone, unless the value itself is absolute (epoch milliseconds, ISO strings
    with an offset, aware datetimes). Relative expressions such as "now-6h"
    are evaluated against the current time in that zone.

    Args:
        value: Aware datetime, string, epoch milliseconds, naive datetime,
            date, component list (0-based month) or component dict
        options: ParseOptions or a dict with the same keys

    Returns:
        Aware datetime, or None when absolute input cannot be read
        (strict mode raises instead)

    Example:
        >>> resolve("now-1d/d", {"time_zone": "UTC"})
        datetime.datetime(2024, 3, 1, 0, 0, tzinfo=<UTC>)
    """
    if is_instant(value):
        return value

    if isinstance(value, str):
        return resolve_string(value, options)

    return resolve_generic(value, options)


def resolve_string(value: str, options: OptionsInput = None) -> Optional[Instant]:
    """
    Resolve text.

    Any string containing "now" is treated as a relative expression candidate;
    the engine's validity check decides. Invalid or unevaluable candidates
    resolve to the current instant.
    """
    options = ParseOptions.coerce(options)

    if NOW not in value:
        return resolve_generic(value, options)

    time_zone = get_time_zone(options)

    if not datemath.is_valid_expression(value, time_zone):
        return _current_instant(value, time_zone, options, "not a valid relative expression")

    parsed = datemath.evaluate(
        value,
        options.round_up,
        time_zone,
        options.fiscal_year_start_month,
    )
    if parsed is None:
        return _current_instant(value, time_zone, options, "relative expression did not evaluate")
    return parsed


def resolve_generic(value: RawInput, options: OptionsInput = None) -> Optional[Instant]:
    """
    Resolve a non-relative value in the effective zone.

    Returns:
        Aware datetime, or None for input that cannot be read
    """
    options = ParseOptions.coerce(options)
    time_zone = get_time_zone(options)
    zone = zone_for(time_zone)

    try:
        result = _construct(value, zone)
    except (ValueError, OverflowError, TypeError) as e:
        if _is_strict(options):
            raise InvalidDateTimeError(
                f"Cannot resolve {value!r}: {e}", value=value, time_zone=time_zone) from e
        logger.debug("Cannot resolve %r in %s: %s", value, time_zone, e)
        return None
    return result


def _is_strict(options: ParseOptions) -> bool:
    if options.strict is None:
        return config.STRICT_MODE
    return options.strict


def _current_instant(
    value: str,
    time_zone: str,
    options: ParseOptions,
    reason: str
) -> Instant:
    if _is_strict(options):
        raise InvalidExpressionError(
            f"{value!r}: {reason}", value=value, time_zone=time_zone)
    logger.debug("%r: %s, using current instant", value, reason)
    return clock.now(zone_for(time_zone))


# ============================================================================
# Construction
# ============================================================================

def _construct(value: Any, zone: tzinfo) -> datetime:
    """Build an aware datetime in ``zone``; raises on unreadable input."""
    if value is None:
        return clock.now(zone)

    if isinstance(value, bool):
        raise TypeError("bool is not a date")

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return normalize(value, zone)
        return localize(value, zone)

    if isinstance(value, date):
        return localize(datetime.combine(value, time()), zone)

    if isinstance(value, (int, float)):
        return normalize(_from_epoch_millis(value), zone)

    if isinstance(value, str):
        return _from_string(value, zone)

    if isinstance(value, Mapping):
        return localize(_from_component_dict(value), zone)

    if isinstance(value, (list, tuple)):
        return localize(_from_components(value), zone)

    raise TypeError(f"Unsupported date input type: {type(value).__name__}")


def _from_epoch_millis(millis: Union[int, float]) -> datetime:
    return _EPOCH + timedelta(milliseconds=millis)


def _from_string(text: str, zone: tzinfo) -> datetime:
    text = text.strip()
    if not text:
        raise ValueError("empty date string")

    try:
        parsed = dateutil_parser.isoparse(text)
    except ValueError:
        # Not ISO-8601; fall back to the permissive parser
        logger.debug("Non ISO-8601 date string %r, using fuzzy parser", text)
        today = clock.now(zone).replace(tzinfo=None, hour=0, minute=0, second=0, microsecond=0)
        parsed = dateutil_parser.parse(text, default=today)

    if parsed.tzinfo is not None:
        return normalize(parsed, zone)
    return localize(parsed, zone)


def _from_components(parts: Sequence[Any]) -> datetime:
    if not parts:
        raise ValueError("empty component list")
    if len(parts) > len(_COMPONENT_NAMES):
        raise ValueError(f"too many date components: {len(parts)}")
    components = dict(zip(_COMPONENT_NAMES, parts))
    # Sequences count months from 0, component dicts from 1
    month = components.get("month")
    if isinstance(month, int) and not isinstance(month, bool):
        components["month"] = month + 1
    return _from_component_dict(components)


def _from_component_dict(components: Mapping[str, Any]) -> datetime:
    unknown = set(components) - set(_COMPONENT_NAMES)
    if unknown:
        raise ValueError(f"unknown date components: {', '.join(sorted(unknown))}")
    if "year" not in components:
        raise ValueError("date components need a year")
    for name, part in components.items():
        if isinstance(part, bool) or not isinstance(part, int):
            raise TypeError(f"{name} must be int, got {type(part).__name__}")
    return datetime(
        components["year"],
        components.get("month", 1),
        components.get("day", 1),
        components.get("hour", 0),
        components.get("minute", 0),
        components.get("second", 0),
        components.get("microsecond", 0),
    )
