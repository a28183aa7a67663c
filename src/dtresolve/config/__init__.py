"""
Config package.

Exposes the environment-backed settings object and the temporal constants.
"""

from .config import config, ResolverConfig
from . import temporal

__all__ = ["config", "ResolverConfig", "temporal"]
