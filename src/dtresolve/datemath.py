"""
Relative Expression Engine

Evaluates quick date-math expressions anchored to "now" or to an explicit
ISO-8601 timestamp:

    now             current instant
    now-6h          six hours ago
    now-7d/d        start (or, with round_up, end) of the day a week ago
    now/fy          start of the current fiscal year
    2024-01-31||+1M anchored expression → 2024-02-29

Each math step is an operator ("/" round, "+" add, "-" subtract), an optional
count (default 1, rounding only accepts 1) and a unit: y M w d h m s Q, or a
fiscal unit fy / fQ.

Nothing here raises for malformed text; unusable input yields None.
"""
import logging
import re
import string
from datetime import datetime, timedelta, tzinfo
from typing import Any, Optional

from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

from . import clock
from .config import config
from .config.temporal import (
    ABSOLUTE_UNITS,
    ANCHOR_SEPARATOR,
    FISCAL_PREFIX,
    FISCAL_UNITS,
    MAX_NUMBER_INDEX,
    MONTHS_PER_QUARTER,
    NOW,
    UNITS,
    MathOp,
)
from .data_types import is_instant
from .timezones import UTC, get_default_time_zone, localize, normalize, zone_for

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")
_ONE_MICROSECOND = timedelta(microseconds=1)
_ABSOLUTE_DELTA_ARG = {"h": "hours", "m": "minutes", "s": "seconds"}


def is_math_string(text: Any) -> bool:
    """True for text shaped like a date-math expression ("now…" or "…||…")."""
    if not text or not isinstance(text, str):
        return False
    return text[:len(NOW)] == NOW or ANCHOR_SEPARATOR in text


def is_valid_expression(text: Any, time_zone: Optional[str] = None) -> bool:
    """
    Check whether ``text`` evaluates to an instant.

    Total: returns False for anything that is not a well-formed expression,
    including non-string input.
    """
    if not isinstance(text, str):
        return False
    return parse(text, time_zone=time_zone) is not None


def evaluate(
    text: Any,
    round_up: bool = False,
    time_zone: Optional[str] = None,
    fiscal_year_start_month: Optional[int] = None
) -> Optional[datetime]:
    """
    Evaluate an expression.

    Args:
        text: Expression such as "now-1d/d"
        round_up: Round to the end of the unit instead of its start
        time_zone: Zone the "now" anchor and wall-clock arithmetic use;
            None means the process-wide default
        fiscal_year_start_month: 0-based fiscal year start; None uses config

    Returns:
        Aware datetime, or None when the expression cannot be evaluated
    """
    if fiscal_year_start_month is None:
        fiscal_year_start_month = config.FISCAL_YEAR_START_MONTH
    return parse(text, round_up, time_zone, fiscal_year_start_month)


def parse(
    text: Any,
    round_up: bool = False,
    time_zone: Optional[str] = None,
    fiscal_year_start_month: int = 0
) -> Optional[datetime]:
    """Split ``text`` into anchor and math part and evaluate both."""
    if not text:
        return None
    if not isinstance(text, str):
        return text if is_instant(text) else None

    zone = zone_for(time_zone or get_default_time_zone())

    if text[:len(NOW)] == NOW:
        anchor = clock.now(zone)
        math_string = text[len(NOW):]
    else:
        index = text.find(ANCHOR_SEPARATOR)
        if index == -1:
            anchor_text, math_string = text, ""
        else:
            anchor_text = text[:index]
            math_string = text[index + len(ANCHOR_SEPARATOR):]
        anchor = _parse_anchor(anchor_text, zone)
        if anchor is None:
            return None

    if not math_string:
        return anchor

    try:
        return parse_date_math(math_string, anchor, round_up, fiscal_year_start_month)
    except (OverflowError, ValueError) as e:
        logger.debug("Date math %r out of range: %s", text, e)
        return None


def _parse_anchor(anchor_text: str, zone: tzinfo) -> Optional[datetime]:
    try:
        parsed = dateutil_parser.isoparse(anchor_text)
    except (ValueError, OverflowError):
        logger.debug("Anchor %r is not ISO-8601", anchor_text)
        return None
    if parsed.tzinfo is None:
        return localize(parsed, zone)
    return normalize(parsed, zone)


def parse_date_math(
    math_string: str,
    time: datetime,
    round_up: bool = False,
    fiscal_year_start_month: int = 0
) -> Optional[datetime]:
    """
    Apply a math suffix ("-1d/d", "+2h") to ``time``.

    Returns:
        Resulting datetime, or None at the first malformed step
    """
    stripped = _WHITESPACE.sub("", math_string)
    result = time
    i = 0
    length = len(stripped)

    while i < length:
        c = stripped[i]
        i += 1
        try:
            op = MathOp(c)
        except ValueError:
            return None

        if i >= length or stripped[i] not in string.digits:
            num = 1
        else:
            num_from = i
            while i < length and stripped[i] in string.digits:
                i += 1
                if i > MAX_NUMBER_INDEX:
                    return None
            num = int(stripped[num_from:i])

        # rounding only to a single unit
        if op is MathOp.ROUND and num != 1:
            return None

        unit = stripped[i:i + 1]
        i += 1
        is_fiscal = False
        if unit == FISCAL_PREFIX:
            unit = stripped[i:i + 1]
            i += 1
            is_fiscal = True

        if unit not in UNITS:
            return None

        if op is MathOp.ROUND:
            if is_fiscal:
                if unit not in FISCAL_UNITS:
                    return None
                result = round_to_fiscal(fiscal_year_start_month, result, unit, round_up)
            elif round_up:
                result = end_of(result, unit)
            else:
                result = start_of(result, unit)
        elif op is MathOp.ADD:
            result = shift(result, num, unit)
        else:
            result = shift(result, -num, unit)

    return result


def round_to_fiscal(
    fy_start_month: int,
    time: datetime,
    unit: str,
    round_up: bool
) -> Optional[datetime]:
    """
    Round to the start or end of a fiscal year ("y") or fiscal quarter ("Q").

    ``fy_start_month`` is 0-based. Other units return None.
    """
    month = time.month - 1
    if unit == "y":
        if round_up:
            start = round_to_fiscal(fy_start_month, time, unit, False)
            return end_of(shift(start, 11, "M"), "M")
        back = (month - fy_start_month + 12) % 12
        return start_of(shift(time, -back, "M"), "M")
    if unit == "Q":
        if round_up:
            start = round_to_fiscal(fy_start_month, time, unit, False)
            return end_of(shift(start, MONTHS_PER_QUARTER - 1, "M"), "M")
        back = (month - fy_start_month + MONTHS_PER_QUARTER) % MONTHS_PER_QUARTER
        return start_of(shift(time, -back, "M"), "M")
    return None


# ============================================================================
# Unit arithmetic
# ============================================================================

def shift(time: datetime, num: int, unit: str) -> datetime:
    """
    Move ``time`` by ``num`` units.

    Hours, minutes and seconds move absolute time. Larger units move the
    wall clock and re-localize, so "+1d" keeps the time of day across DST.
    """
    if unit in ABSOLUTE_UNITS:
        delta = timedelta(**{_ABSOLUTE_DELTA_ARG[unit]: num})
        return normalize(time.astimezone(UTC) + delta, time.tzinfo)
    return _wall_clock(time, time.replace(tzinfo=None) + _calendar_delta(num, unit))


def start_of(time: datetime, unit: str) -> datetime:
    """Truncate ``time`` to the start of ``unit`` in its own zone."""
    if unit == "s":
        return time.replace(microsecond=0)
    if unit == "m":
        return time.replace(second=0, microsecond=0)
    if unit == "h":
        return time.replace(minute=0, second=0, microsecond=0)

    midnight = time.replace(tzinfo=None, hour=0, minute=0, second=0, microsecond=0)
    if unit == "d":
        return _wall_clock(time, midnight)
    if unit == "w":
        back = (midnight.weekday() - config.week_start_weekday) % 7
        return _wall_clock(time, midnight - timedelta(days=back))
    if unit == "M":
        return _wall_clock(time, midnight.replace(day=1))
    if unit == "Q":
        first_month = (midnight.month - 1) // MONTHS_PER_QUARTER * MONTHS_PER_QUARTER + 1
        return _wall_clock(time, midnight.replace(month=first_month, day=1))
    if unit == "y":
        return _wall_clock(time, midnight.replace(month=1, day=1))
    raise ValueError(f"Unknown unit: {unit}")


def end_of(time: datetime, unit: str) -> datetime:
    """Last representable microsecond of ``unit`` containing ``time``."""
    following = shift(start_of(time, unit), 1, unit)
    return normalize(following.astimezone(UTC) - _ONE_MICROSECOND, time.tzinfo)


def _calendar_delta(num: int, unit: str) -> relativedelta:
    if unit == "d":
        return relativedelta(days=num)
    if unit == "w":
        return relativedelta(weeks=num)
    if unit == "M":
        return relativedelta(months=num)
    if unit == "Q":
        return relativedelta(months=num * MONTHS_PER_QUARTER)
    if unit == "y":
        return relativedelta(years=num)
    raise ValueError(f"Unknown unit: {unit}")


def _wall_clock(reference: datetime, naive: datetime) -> datetime:
    """Localize wall-clock fields in the zone of ``reference``."""
    return localize(naive, reference.tzinfo)
