# dtresolve/config/temporal.py
from enum import Enum

# ----------------------------
# Zone literals
# ----------------------------
UTC_ZONE = "utc"
LOCAL_ZONES = frozenset({"browser", "local"})

# ----------------------------
# Relative expressions
# ----------------------------
NOW = "now"
ANCHOR_SEPARATOR = "||"

# The number scanner gives up once its cursor passes this index.
MAX_NUMBER_INDEX = 10


class MathOp(str, Enum):
    ROUND = "/"
    ADD = "+"
    SUBTRACT = "-"


# Unit symbols accepted after an operator. "M" is month, "m" is minute.
UNITS = ("y", "M", "w", "d", "h", "m", "s", "Q")
FISCAL_PREFIX = "f"
FISCAL_UNITS = ("y", "Q")

# Units moved in absolute time; the rest move wall-clock time.
ABSOLUTE_UNITS = frozenset({"h", "m", "s"})

# ----------------------------
# Calendar
# ----------------------------
WEEKDAY_TO_NUMBER = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}

MONTHS_PER_QUARTER = 3
