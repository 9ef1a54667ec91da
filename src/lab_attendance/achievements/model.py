from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import RewardLevel


@dataclass(frozen=True)
class Reward:
    reward_id: int
    title: str
    description: str
    level: RewardLevel
    icon_url: Optional[str] = None


@dataclass(frozen=True)
class RewardSummary:
    """Catalogue entry with the number of students who earned it."""

    reward: Reward
    earned_count: int


@dataclass(frozen=True)
class EarnedReward:
    reward: Reward
    earned_at: datetime


@dataclass(frozen=True)
class RewardEarner:
    student_id: str
    name: str
    earned_at: datetime
