from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from lab_attendance.achievements.model import EarnedReward, Reward, RewardEarner, RewardSummary
from lab_attendance.attendance.model import AttendanceRecord
from lab_attendance.core.enums import RewardLevel, SessionState
from lab_attendance.core.exceptions import ConflictError, StoreUnavailableError

# 2025-01-01 is a Wednesday, 2025-01-04 a Saturday.
WEDNESDAY = date(2025, 1, 1)
THURSDAY = date(2025, 1, 2)
SATURDAY = date(2025, 1, 4)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class InMemoryAttendance:
    """Attendance store honouring the one-OPEN-per-student unique index."""

    def __init__(self):
        self._rows: dict[int, AttendanceRecord] = {}
        self._id = 0
        self.fail_mark_ids: set[int] = set()
        self.pages_scanned = 0

    def add(self, **fields) -> AttendanceRecord:
        self._id += 1
        fields.setdefault("clock_out", None)
        fields.setdefault("state", SessionState.CLOSED if fields["clock_out"] else SessionState.OPEN)
        rec = AttendanceRecord(record_id=self._id, **fields)
        self._rows[rec.record_id] = rec
        return rec

    def get(self, record_id: int) -> AttendanceRecord:
        return self._rows[record_id]

    def all(self) -> list[AttendanceRecord]:
        return sorted(self._rows.values(), key=lambda r: r.record_id)

    def open_count(self, student_id: str) -> int:
        return sum(1 for r in self._rows.values() if r.student_id == student_id and r.state == SessionState.OPEN)

    def create_open_session(self, *, student_id: str, work_date: date, clock_in: datetime) -> int:
        if self.open_count(student_id):
            raise ConflictError("Duplicate entry for open_guard")
        return self.add(student_id=student_id, work_date=work_date, clock_in=clock_in).record_id

    def find_open_session(self, student_id: str) -> Optional[AttendanceRecord]:
        items = [r for r in self._rows.values() if r.student_id == student_id and r.state == SessionState.OPEN]
        items.sort(key=lambda r: (r.work_date, r.clock_in), reverse=True)
        return items[0] if items else None

    def close_session(self, *, record_id: int, clock_out: datetime, work_minutes: int, overtime_minutes=None) -> bool:
        rec = self._rows.get(record_id)
        if not rec or rec.state == SessionState.CLOSED:
            return False
        self._rows[record_id] = replace(
            rec,
            clock_out=clock_out,
            work_minutes=work_minutes,
            overtime_minutes=overtime_minutes,
            state=SessionState.CLOSED,
        )
        return True

    def mark_abandoned(self, record_id: int) -> bool:
        if record_id in self.fail_mark_ids:
            raise StoreUnavailableError("Database query failed")
        rec = self._rows.get(record_id)
        if not rec or rec.state != SessionState.OPEN:
            return False
        self._rows[record_id] = replace(rec, state=SessionState.ABANDONED)
        return True

    def find_record(self, record_id: int, student_id: str) -> Optional[AttendanceRecord]:
        rec = self._rows.get(record_id)
        if rec and rec.student_id == student_id:
            return rec
        return None

    def scan_open_older_than(self, cutoff: datetime, *, batch_size: int = 100):
        last_id = 0
        while True:
            page = [
                r
                for r in self.all()
                if r.state == SessionState.OPEN and r.clock_in < cutoff and r.record_id > last_id
            ][:batch_size]
            self.pages_scanned += 1
            if not page:
                return
            yield from page
            last_id = page[-1].record_id
            if len(page) < batch_size:
                return

    def get_latest_for_student(self, student_id: str) -> Optional[AttendanceRecord]:
        items = self.list_for_student(student_id)
        return items[0] if items else None

    def list_abandoned_for_student(self, student_id: str):
        return [r for r in self.list_for_student(student_id) if r.state == SessionState.ABANDONED]

    def list_for_student(self, student_id: str, *, start_date=None, end_date=None):
        items = [
            r
            for r in self._rows.values()
            if r.student_id == student_id
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        items.sort(key=lambda r: (r.work_date, r.clock_in), reverse=True)
        return items


class InMemoryAchievements:
    def __init__(self, reward_ids=range(1, 9)):
        self.rewards = {
            rid: Reward(reward_id=rid, title=f"Reward {rid}", description="", level=RewardLevel.BRONZE)
            for rid in reward_ids
        }
        self.earned: dict[tuple[str, int], datetime] = {}
        self.names: dict[str, str] = {}

    def list_reward_ids(self):
        return sorted(self.rewards)

    def list_rewards(self):
        return [
            RewardSummary(reward=r, earned_count=sum(1 for (_, rid) in self.earned if rid == r.reward_id))
            for r in self.rewards.values()
        ]

    def get_rewards(self, reward_ids):
        return [self.rewards[rid] for rid in sorted(reward_ids) if rid in self.rewards]

    def list_earned_ids(self, student_id: str):
        return [rid for (sid, rid) in self.earned if sid == student_id]

    def list_for_student(self, student_id: str):
        return [
            EarnedReward(reward=self.rewards[rid], earned_at=at)
            for (sid, rid), at in self.earned.items()
            if sid == student_id
        ]

    def list_earners(self, reward_id: int):
        items = [
            RewardEarner(student_id=sid, name=self.names.get(sid, sid), earned_at=at)
            for (sid, rid), at in self.earned.items()
            if rid == reward_id
        ]
        items.sort(key=lambda e: (e.earned_at, e.student_id))
        return items

    def grant(self, *, student_id: str, reward_id: int, earned_at: datetime) -> bool:
        if (student_id, reward_id) in self.earned:
            return False
        self.earned[(student_id, reward_id)] = earned_at
        return True


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def achievements_repo() -> InMemoryAchievements:
    return InMemoryAchievements()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 1, 1, 10, 30, 0))
