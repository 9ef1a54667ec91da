from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..overtime.calculator.base import OvertimeCalculator
from ..overtime.calculator.standard_calculator import StandardOvertimeCalculator
from .model import EarnedReward, Reward, RewardEarner, RewardSummary
from .repository import AchievementRepository
from .rules import REWARD_RULES, AchievementRule, compute_metrics

logger = logging.getLogger(__name__)


class AchievementService:
    """Grants rewards whose thresholds a student's closed sessions have reached."""

    def __init__(
        self,
        achievements: AchievementRepository,
        attendance: AttendanceRepository,
        *,
        calculator: OvertimeCalculator | None = None,
        rules: Sequence[AchievementRule] = REWARD_RULES,
        clock: Callable[[], datetime] | None = None,
    ):
        self._achievements = achievements
        self._attendance = attendance
        self._calculator = calculator or StandardOvertimeCalculator()
        self._rules = tuple(rules)
        self._clock = clock or now_local

    def check_and_grant(self, student_id: str) -> list[int]:
        catalogue = set(self._achievements.list_reward_ids())
        earned = set(self._achievements.list_earned_ids(student_id))
        pending = [r for r in self._rules if r.reward_id in catalogue and r.reward_id not in earned]
        if not pending:
            return []

        metrics = compute_metrics(self._attendance.list_for_student(student_id), self._calculator)
        now = self._clock().replace(microsecond=0)

        granted: list[int] = []
        for rule in pending:
            if not rule.is_met(metrics):
                continue
            if self._achievements.grant(student_id=student_id, reward_id=rule.reward_id, earned_at=now):
                granted.append(rule.reward_id)

        if granted:
            logger.info("student %s earned rewards %s", student_id, granted)
        return granted

    def list_all(self) -> Sequence[RewardSummary]:
        return self._achievements.list_rewards()

    def list_for_student(self, student_id: str) -> Sequence[EarnedReward]:
        return self._achievements.list_for_student(student_id)

    def list_earners(self, reward_id: int) -> Sequence[RewardEarner]:
        return self._achievements.list_earners(reward_id)

    def describe(self, reward_ids: Sequence[int]) -> Sequence[Reward]:
        return self._achievements.get_rewards(reward_ids)
