"""
Data structures shared by the resolver stages.

An Instant is a timezone-aware ``datetime``. Everything else a caller can hand
to ``resolve`` is a RawInput.
"""
from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Sequence, Union

Instant = datetime

RawInput = Union[datetime, date, str, int, float, Sequence[int], Mapping[str, int], None]

# camelCase keys accepted when options arrive as a plain dict
_OPTION_ALIASES = {
    "timeZone": "time_zone",
    "roundUp": "round_up",
    "fiscalYearStartMonth": "fiscal_year_start_month",
}


def is_instant(value: Any) -> bool:
    """True for a fully resolved, timezone-aware datetime."""
    return (
        isinstance(value, datetime)
        and value.tzinfo is not None
        and value.utcoffset() is not None
    )


@dataclass(frozen=True)
class ParseOptions:
    """
    Options controlling a single resolution.

    Attributes:
        time_zone: Zone name, "utc", "browser"/"local", or None for the
            process-wide default
        round_up: For relative expressions, round to the end of the unit
            instead of its start (now/d → 23:59:59.999999)
        fiscal_year_start_month: 0-based month the fiscal year starts in;
            None uses the configured default
        strict: Raise instead of falling back; None uses the configured default
    """
    time_zone: Optional[str] = None
    round_up: bool = False
    fiscal_year_start_month: Optional[int] = None
    strict: Optional[bool] = None

    def __post_init__(self):
        """Validate option values."""
        if self.time_zone is not None and not isinstance(self.time_zone, str):
            raise TypeError(f"time_zone must be str, got {type(self.time_zone)}")
        if self.fiscal_year_start_month is not None and not 0 <= self.fiscal_year_start_month <= 11:
            raise ValueError(
                f"fiscal_year_start_month must be between 0 and 11, got {self.fiscal_year_start_month}")

    @classmethod
    def coerce(cls, options: Union["ParseOptions", Dict[str, Any], None]) -> "ParseOptions":
        """Build options from None, an existing instance, or a dict."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, Mapping):
            known = {f.name for f in fields(cls)}
            kwargs = {}
            for key, value in options.items():
                name = _OPTION_ALIASES.get(key, key)
                if name not in known:
                    raise TypeError(f"Unknown parse option: {key}")
                kwargs[name] = value
            return cls(**kwargs)
        raise TypeError(f"options must be ParseOptions or dict, got {type(options)}")
