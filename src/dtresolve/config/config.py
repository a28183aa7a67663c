"""
dtresolve Configuration

Centralized configuration for the resolver.
All settings can be overridden via environment variables.
"""
import os
from typing import Optional

from .temporal import WEEKDAY_TO_NUMBER


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class ResolverConfig:
    """
    Central configuration for dtresolve.

    All settings have sensible defaults and can be overridden via environment
    variables. Values are read when the instance is created, so a fresh
    instance picks up the current environment.

    Example:
        >>> from dtresolve.config import config
        >>> print(config.DEFAULT_TIME_ZONE)
        browser

        # Override via environment:
        >>> os.environ["DTRESOLVE_DEFAULT_TIME_ZONE"] = "UTC"
        >>> config = ResolverConfig.from_env()
        >>> print(config.DEFAULT_TIME_ZONE)
        UTC
    """

    def __init__(self):
        # ====================================================================
        # Resolution Settings
        # ====================================================================

        self.DEFAULT_TIME_ZONE: str = os.getenv(
            "DTRESOLVE_DEFAULT_TIME_ZONE", "browser").strip() or "browser"
        """Zone used when a call does not name one ('browser' = local zone)"""

        self.WEEK_START: str = os.getenv(
            "DTRESOLVE_WEEK_START", "sunday").strip().lower()
        """First day of the week used when rounding to weeks"""

        self.FISCAL_YEAR_START_MONTH: int = int(os.getenv(
            "DTRESOLVE_FISCAL_YEAR_START_MONTH", "0"))
        """Fiscal year start month, 0-based (0 = January)"""

        self.STRICT_MODE: bool = _env_bool("DTRESOLVE_STRICT", "false")
        """Raise instead of silently falling back on unresolvable input"""

        # ====================================================================
        # Logging Settings
        # ====================================================================

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
        """Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"""

        self.LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")
        """Log format: 'json' (structured) or 'pretty' (readable)"""

        self.LOG_FILE: Optional[str] = os.getenv("LOG_FILE")
        """Optional: Write logs to file (e.g., '/var/log/dtresolve/cli.log')"""

        self.validate()

    # ========================================================================
    # Helper Methods
    # ========================================================================

    def validate(self) -> None:
        """Reject settings the resolver cannot work with."""
        if self.WEEK_START not in WEEKDAY_TO_NUMBER:
            raise ValueError(
                f"DTRESOLVE_WEEK_START must be a weekday name, got {self.WEEK_START!r}")
        if not 0 <= self.FISCAL_YEAR_START_MONTH <= 11:
            raise ValueError(
                "DTRESOLVE_FISCAL_YEAR_START_MONTH must be between 0 and 11, "
                f"got {self.FISCAL_YEAR_START_MONTH}")
        if self.LOG_FORMAT not in ("json", "pretty"):
            raise ValueError(
                f"LOG_FORMAT must be 'json' or 'pretty', got {self.LOG_FORMAT!r}")

    @property
    def week_start_weekday(self) -> int:
        """WEEK_START as a datetime.weekday() number (Monday = 0)."""
        return WEEKDAY_TO_NUMBER[self.WEEK_START]

    @classmethod
    def from_env(cls):
        """
        Create config from environment variables.

        Returns:
            New ResolverConfig instance with current environment values
        """
        return cls()

    def reload(self) -> None:
        """Re-read the environment into this instance (e.g. after loading .env)."""
        self.__dict__.update(type(self)().__dict__)

    def summary(self) -> str:
        """
        Get configuration summary as formatted string.

        Returns:
            Multi-line string with all config values
        """
        lines = [
            "=" * 60,
            "dtresolve Configuration",
            "=" * 60,
            "",
            "Resolution:",
            f"  Default Zone:       {self.DEFAULT_TIME_ZONE}",
            f"  Week Start:         {self.WEEK_START}",
            f"  Fiscal Year Start:  {self.FISCAL_YEAR_START_MONTH}",
            f"  Strict Mode:        {'Enabled' if self.STRICT_MODE else 'Disabled'}",
            "",
            "Logging:",
            f"  Level:              {self.LOG_LEVEL}",
            f"  Format:             {self.LOG_FORMAT}",
            f"  File:               {self.LOG_FILE or 'None'}",
            "",
            "=" * 60,
        ]
        return "\n".join(lines)

    def __repr__(self):
        """String representation."""
        return (f"<ResolverConfig tz={self.DEFAULT_TIME_ZONE} "
                f"strict={self.STRICT_MODE}>")


# Global config instance
config = ResolverConfig()
