"""Wall-clock access. Tests patch ``now`` to pin the current time."""
from datetime import datetime, timezone
from typing import Any


def now(tz: Any = timezone.utc) -> datetime:
    """Current instant expressed in ``tz``."""
    return datetime.now(tz)
