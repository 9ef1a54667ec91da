"""Achievement thresholds and the per-student metrics they are checked against."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from enum import Enum
from typing import Iterable

from ..attendance.model import AttendanceRecord
from ..overtime.calculator.base import OvertimeCalculator

EARLY_BIRD_BEFORE = time(9, 30)
NIGHT_KNIGHT_FROM = time(23, 30)
KURAPIKA_FROM = time(2, 0)
LONG_DAY_MINUTES = 13 * 60


class Metric(str, Enum):
    TOTAL_OVERTIME = "total_overtime"
    EARLY_BIRD = "early_bird"
    NIGHT_KNIGHT = "night_knight"
    LONG_DAY = "long_day"
    KURAPIKA = "kurapika"


@dataclass(frozen=True)
class StudentMetrics:
    total_overtime_minutes: int = 0
    early_bird_count: int = 0
    night_knight_count: int = 0
    long_day_count: int = 0
    kurapika_count: int = 0

    def value_of(self, metric: Metric) -> int:
        return {
            Metric.TOTAL_OVERTIME: self.total_overtime_minutes,
            Metric.EARLY_BIRD: self.early_bird_count,
            Metric.NIGHT_KNIGHT: self.night_knight_count,
            Metric.LONG_DAY: self.long_day_count,
            Metric.KURAPIKA: self.kurapika_count,
        }[metric]


@dataclass(frozen=True)
class AchievementRule:
    reward_id: int
    metric: Metric
    threshold: int

    def is_met(self, metrics: StudentMetrics) -> bool:
        return metrics.value_of(self.metric) >= self.threshold


REWARD_RULES: tuple[AchievementRule, ...] = (
    AchievementRule(1, Metric.TOTAL_OVERTIME, 60),
    AchievementRule(2, Metric.EARLY_BIRD, 1),
    AchievementRule(3, Metric.NIGHT_KNIGHT, 1),
    AchievementRule(4, Metric.LONG_DAY, 1),
    AchievementRule(5, Metric.TOTAL_OVERTIME, 3000),
    AchievementRule(6, Metric.KURAPIKA, 1),
    AchievementRule(7, Metric.TOTAL_OVERTIME, 6000),
    AchievementRule(8, Metric.TOTAL_OVERTIME, 60000),
)


def compute_metrics(records: Iterable[AttendanceRecord], calculator: OvertimeCalculator) -> StudentMetrics:
    total_overtime = 0
    early_bird = 0
    night_knight = 0
    long_day = 0
    kurapika = 0

    for r in records:
        # Early bird looks at clock-in only, so open and abandoned sessions count too.
        if r.clock_in.time() < EARLY_BIRD_BEFORE:
            early_bird += 1
        if not r.is_closed or r.clock_out is None:
            continue

        total_overtime += calculator.overtime_minutes(r.clock_in, r.clock_out, r.work_date)
        work_minutes = r.work_minutes if r.work_minutes is not None else calculator.work_minutes(r.clock_in, r.clock_out)

        next_day = r.clock_out.date() > r.work_date
        if next_day or r.clock_out.time() >= NIGHT_KNIGHT_FROM:
            night_knight += 1
        if work_minutes >= LONG_DAY_MINUTES:
            long_day += 1
        if next_day and r.clock_out.time() >= KURAPIKA_FROM:
            kurapika += 1

    return StudentMetrics(
        total_overtime_minutes=total_overtime,
        early_bird_count=early_bird,
        night_knight_count=night_knight,
        long_day_count=long_day,
        kurapika_count=kurapika,
    )
