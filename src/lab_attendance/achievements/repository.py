from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import EarnedReward, Reward, RewardEarner, RewardSummary


class AchievementRepository(Protocol):
    def list_reward_ids(self) -> Sequence[int]:
        raise NotImplementedError

    def list_rewards(self) -> Sequence[RewardSummary]:
        raise NotImplementedError

    def get_rewards(self, reward_ids: Sequence[int]) -> Sequence[Reward]:
        raise NotImplementedError

    def list_earned_ids(self, student_id: str) -> Sequence[int]:
        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[EarnedReward]:
        raise NotImplementedError

    def list_earners(self, reward_id: int) -> Sequence[RewardEarner]:
        """Students holding ``reward_id``, earliest first."""

        raise NotImplementedError

    def grant(self, *, student_id: str, reward_id: int, earned_at: datetime) -> bool:
        """Insert once; False if the student already had it."""

        raise NotImplementedError
