from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..core.enums import RewardLevel
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import EarnedReward, Reward, RewardEarner, RewardSummary
from .repository import AchievementRepository


def _to_reward(r: dict) -> Reward:
    return Reward(
        reward_id=int(r["reward_id"]),
        title=r["title"],
        description=r["description"],
        level=RewardLevel(r["level"]),
        icon_url=r.get("icon_url"),
    )


class MySQLAchievementRepository(AchievementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_reward_ids(self) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT reward_id FROM rewards ORDER BY reward_id")
            return [int(r["reward_id"]) for r in fetchall(cur)]

    def list_rewards(self) -> Sequence[RewardSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT r.reward_id, r.title, r.description, r.level, r.icon_url,
                       COUNT(sr.id) AS earned_count
                FROM rewards r
                LEFT JOIN student_rewards sr ON sr.reward_id = r.reward_id
                GROUP BY r.reward_id, r.title, r.description, r.level, r.icon_url
                ORDER BY FIELD(r.level, 'Gold', 'Silver', 'Bronze'), r.reward_id
                """
            )
            return [
                RewardSummary(reward=_to_reward(r), earned_count=int(r["earned_count"] or 0))
                for r in fetchall(cur)
            ]

    def get_rewards(self, reward_ids: Sequence[int]) -> Sequence[Reward]:
        ids = [int(i) for i in reward_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT reward_id, title, description, level, icon_url
                FROM rewards
                WHERE reward_id IN ({placeholders})
                ORDER BY reward_id
                """,
                tuple(ids),
            )
            return [_to_reward(r) for r in fetchall(cur)]

    def list_earned_ids(self, student_id: str) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT reward_id FROM student_rewards WHERE student_id=%s", (student_id,))
            return [int(r["reward_id"]) for r in fetchall(cur)]

    def list_for_student(self, student_id: str) -> Sequence[EarnedReward]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT r.reward_id, r.title, r.description, r.level, r.icon_url, sr.earned_at
                FROM student_rewards sr
                JOIN rewards r ON r.reward_id = sr.reward_id
                WHERE sr.student_id=%s
                ORDER BY sr.earned_at DESC
                """,
                (student_id,),
            )
            return [EarnedReward(reward=_to_reward(r), earned_at=r["earned_at"]) for r in fetchall(cur)]

    def list_earners(self, reward_id: int) -> Sequence[RewardEarner]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.student_id, s.name, sr.earned_at
                FROM student_rewards sr
                JOIN students s ON s.student_id = sr.student_id
                WHERE sr.reward_id=%s
                ORDER BY sr.earned_at ASC, s.student_id ASC
                """,
                (int(reward_id),),
            )
            return [
                RewardEarner(student_id=str(r["student_id"]), name=r["name"], earned_at=r["earned_at"])
                for r in fetchall(cur)
            ]

    def grant(self, *, student_id: str, reward_id: int, earned_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO student_rewards(student_id, reward_id, earned_at)
                VALUES(%s,%s,%s)
                """,
                (student_id, int(reward_id), earned_at),
            )
            return cur.rowcount > 0
