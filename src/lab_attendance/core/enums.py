from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Student role used for authorization."""

    ADMIN = "admin"
    USER = "user"


class SessionState(str, Enum):
    """Lifecycle state of an attendance record as stored in the database."""

    OPEN = "OPEN"
    ABANDONED = "ABANDONED"
    CLOSED = "CLOSED"


class ClockAction(str, Enum):
    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"


class RewardLevel(str, Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
