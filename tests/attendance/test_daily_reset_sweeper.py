from __future__ import annotations

from datetime import date, datetime

import pytest

from lab_attendance.attendance.sweeper import DailyResetSweeper
from lab_attendance.core.enums import SessionState

WEDNESDAY = date(2025, 1, 1)
SWEEP_AT = datetime(2025, 1, 2, 5, 0, 0)


def _seed(repo):
    stale = repo.add(student_id="s1", work_date=WEDNESDAY, clock_in=datetime(2025, 1, 1, 13, 0))
    recent = repo.add(student_id="s2", work_date=date(2025, 1, 2), clock_in=datetime(2025, 1, 2, 4, 30))
    closed = repo.add(
        student_id="s3",
        work_date=WEDNESDAY,
        clock_in=datetime(2025, 1, 1, 10, 0),
        clock_out=datetime(2025, 1, 1, 19, 0),
        work_minutes=540,
    )
    already = repo.add(
        student_id="s4",
        work_date=date(2024, 12, 31),
        clock_in=datetime(2024, 12, 31, 9, 0),
        state=SessionState.ABANDONED,
    )
    return stale, recent, closed, already


def test_sweep_abandons_only_stale_open_sessions(attendance_repo, clock):
    stale, recent, closed, already = _seed(attendance_repo)
    clock.set(SWEEP_AT)

    result = DailyResetSweeper(attendance_repo, clock=clock, grace_minutes=60).run_daily_sweep()

    assert result.processed_count == 1
    assert result.failed_count == 0
    assert attendance_repo.get(stale.record_id).state == SessionState.ABANDONED
    assert attendance_repo.get(stale.record_id).clock_out is None
    assert attendance_repo.get(recent.record_id).state == SessionState.OPEN
    assert attendance_repo.get(closed.record_id) == closed
    assert attendance_repo.get(already.record_id) == already


def test_grace_boundary_is_exclusive(attendance_repo, clock):
    on_cutoff = attendance_repo.add(student_id="s1", work_date=date(2025, 1, 2), clock_in=datetime(2025, 1, 2, 4, 0))
    clock.set(SWEEP_AT)

    result = DailyResetSweeper(attendance_repo, clock=clock, grace_minutes=60).run_daily_sweep()

    assert result.processed_count == 0
    assert attendance_repo.get(on_cutoff.record_id).state == SessionState.OPEN


def test_second_sweep_is_a_no_op(attendance_repo, clock):
    _seed(attendance_repo)
    clock.set(SWEEP_AT)
    sweeper = DailyResetSweeper(attendance_repo, clock=clock)

    sweeper.run_daily_sweep()
    before = attendance_repo.all()
    second = sweeper.run_daily_sweep()

    assert second.processed_count == 0
    assert attendance_repo.all() == before


def test_sweep_walks_every_batch(attendance_repo, clock):
    for i in range(5):
        attendance_repo.add(student_id=f"s{i}", work_date=WEDNESDAY, clock_in=datetime(2025, 1, 1, 12, i))
    clock.set(SWEEP_AT)

    result = DailyResetSweeper(attendance_repo, clock=clock, batch_size=2).run_daily_sweep()

    assert result.processed_count == 5
    assert attendance_repo.pages_scanned == 3
    assert all(r.state == SessionState.ABANDONED for r in attendance_repo.all())


def test_failed_record_is_skipped_and_retried_next_run(attendance_repo, clock, caplog):
    first = attendance_repo.add(student_id="s1", work_date=WEDNESDAY, clock_in=datetime(2025, 1, 1, 12, 0))
    second = attendance_repo.add(student_id="s2", work_date=WEDNESDAY, clock_in=datetime(2025, 1, 1, 12, 5))
    attendance_repo.fail_mark_ids.add(first.record_id)
    clock.set(SWEEP_AT)
    sweeper = DailyResetSweeper(attendance_repo, clock=clock)

    result = sweeper.run_daily_sweep()

    assert result.processed_count == 1
    assert result.failed_count == 1
    assert attendance_repo.get(first.record_id).state == SessionState.OPEN
    assert attendance_repo.get(second.record_id).state == SessionState.ABANDONED
    assert "could not mark record" in caplog.text

    attendance_repo.fail_mark_ids.clear()
    retry = sweeper.run_daily_sweep()

    assert retry.processed_count == 1
    assert attendance_repo.get(first.record_id).state == SessionState.ABANDONED


def test_batch_size_must_be_positive(attendance_repo):
    with pytest.raises(ValueError):
        DailyResetSweeper(attendance_repo, batch_size=0)
