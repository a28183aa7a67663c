"""
dtresolve - Date and Time Expression Resolver

Resolves already-parsed datetimes, absolute timestamp strings, epoch values
and relative quick expressions ("now-6h", "now-7d/d") to a single
timezone-aware datetime.

This package provides:
- The resolver entry point (parser.py)
- The relative expression engine (datemath.py)
- Timezone lookup and the process-wide default zone (timezones.py)
- Environment-backed configuration (config/)
- A command line interface (cli/)
"""

# Export configuration
from dtresolve.config import config, ResolverConfig

# Export core types
from dtresolve.data_types import (
    Instant,
    RawInput,
    ParseOptions,
    is_instant,
)

from dtresolve.errors import (
    DateTimeResolutionError,
    InvalidExpressionError,
    InvalidDateTimeError,
)

# Main API
from dtresolve.parser import (
    resolve,
    resolve_string,
    resolve_generic,
)

from dtresolve.datemath import (
    is_valid_expression,
    evaluate,
    is_math_string,
)

from dtresolve.timezones import (
    get_default_time_zone,
    set_default_time_zone,
    reset_default_time_zone,
    lookup_zone,
)

__version__ = "1.0.0"
__author__ = "dtresolve Team"

__all__ = [
    # Configuration
    "config",
    "ResolverConfig",

    # Main API
    "resolve",
    "resolve_string",
    "resolve_generic",

    # Relative expressions
    "is_valid_expression",
    "evaluate",
    "is_math_string",

    # Time zones
    "get_default_time_zone",
    "set_default_time_zone",
    "reset_default_time_zone",
    "lookup_zone",

    # Core types
    "Instant",
    "RawInput",
    "ParseOptions",
    "is_instant",

    # Errors
    "DateTimeResolutionError",
    "InvalidExpressionError",
    "InvalidDateTimeError",
]
