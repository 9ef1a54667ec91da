from __future__ import annotations

from datetime import date, datetime

import pytest

from lab_attendance.attendance.retroactive import RetroactiveCloseService, validate_retroactive_clock_out
from lab_attendance.attendance.service import AttendanceService
from lab_attendance.attendance.sweeper import DailyResetSweeper
from lab_attendance.core.enums import SessionState
from lab_attendance.core.exceptions import (
    AlreadyClosedError,
    FutureClockOutError,
    InvalidOrderError,
    NotFoundError,
    OutOfWindowError,
)

D = date(2025, 1, 1)  # Wednesday
NEXT_MORNING = datetime(2025, 1, 2, 9, 0)


def _abandoned(repo, *, student_id="s1", clock_in=datetime(2025, 1, 1, 9, 0)):
    return repo.add(student_id=student_id, work_date=clock_in.date(), clock_in=clock_in, state=SessionState.ABANDONED)


def _service(repo, clock, checker=None, *, now=NEXT_MORNING) -> RetroactiveCloseService:
    clock.set(now)
    sessions = AttendanceService(repo, clock=clock, achievement_checker=checker)
    return RetroactiveCloseService(repo, sessions)


@pytest.mark.parametrize(
    "clock_out, accepted",
    [
        (datetime(2025, 1, 1, 19, 59, 59), False),
        (datetime(2025, 1, 1, 20, 0, 0), True),
        (datetime(2025, 1, 2, 4, 59, 59), True),
        (datetime(2025, 1, 2, 5, 0, 0), False),
    ],
)
def test_window_boundaries(attendance_repo, clock, clock_out, accepted):
    record = _abandoned(attendance_repo)
    svc = _service(attendance_repo, clock)

    if accepted:
        result = svc.retroactive_close(record.record_id, "s1", clock_out)
        assert result.record.state == SessionState.CLOSED
        assert result.record.clock_out == clock_out
    else:
        with pytest.raises(OutOfWindowError):
            svc.retroactive_close(record.record_id, "s1", clock_out)
        assert attendance_repo.get(record.record_id).state == SessionState.ABANDONED


def test_success_uses_original_work_date(attendance_repo, clock):
    record = _abandoned(attendance_repo)

    result = _service(attendance_repo, clock).retroactive_close(record.record_id, "s1", datetime(2025, 1, 2, 1, 0))

    stored = attendance_repo.get(record.record_id)
    assert stored.state == SessionState.CLOSED
    assert stored.work_date == D
    assert stored.work_minutes == 960
    assert result.overtime_minutes == 60 + 300


def test_unknown_record_is_not_found(attendance_repo, clock):
    with pytest.raises(NotFoundError):
        _service(attendance_repo, clock).retroactive_close(999, "s1", datetime(2025, 1, 1, 21, 0))


def test_someone_elses_record_is_not_found(attendance_repo, clock):
    record = _abandoned(attendance_repo, student_id="s2")

    with pytest.raises(NotFoundError):
        _service(attendance_repo, clock).retroactive_close(record.record_id, "s1", datetime(2025, 1, 1, 21, 0))


def test_closed_record_is_already_closed(attendance_repo, clock):
    record = attendance_repo.add(
        student_id="s1",
        work_date=D,
        clock_in=datetime(2025, 1, 1, 9, 0),
        clock_out=datetime(2025, 1, 1, 18, 0),
        work_minutes=540,
    )

    with pytest.raises(AlreadyClosedError):
        _service(attendance_repo, clock).retroactive_close(record.record_id, "s1", datetime(2025, 1, 1, 21, 0))
    assert attendance_repo.get(record.record_id).clock_out == datetime(2025, 1, 1, 18, 0)


def test_clock_out_before_clock_in_is_invalid_order(attendance_repo, clock):
    record = _abandoned(attendance_repo, clock_in=datetime(2025, 1, 1, 21, 0))

    with pytest.raises(InvalidOrderError):
        _service(attendance_repo, clock).retroactive_close(record.record_id, "s1", datetime(2025, 1, 1, 20, 30))
    with pytest.raises(InvalidOrderError):
        _service(attendance_repo, clock).retroactive_close(record.record_id, "s1", datetime(2025, 1, 1, 21, 0))


def test_order_is_checked_before_window(attendance_repo, clock):
    record = _abandoned(attendance_repo, clock_in=datetime(2025, 1, 1, 21, 0))

    with pytest.raises(InvalidOrderError):
        validate_retroactive_clock_out(record, datetime(2025, 1, 1, 12, 0), now=NEXT_MORNING)


def test_failures_are_distinguishable():
    codes = {AlreadyClosedError.code, InvalidOrderError.code, OutOfWindowError.code, FutureClockOutError.code}

    assert len(codes) == 4
    assert not issubclass(AlreadyClosedError, OutOfWindowError)
    assert not issubclass(OutOfWindowError, InvalidOrderError)


def test_open_session_can_be_closed_retroactively(attendance_repo, clock):
    record = attendance_repo.add(student_id="s1", work_date=D, clock_in=datetime(2025, 1, 1, 15, 0))

    result = _service(attendance_repo, clock).retroactive_close(record.record_id, "s1", datetime(2025, 1, 1, 22, 0))

    assert result.record.state == SessionState.CLOSED
    assert attendance_repo.open_count("s1") == 0


def test_retroactive_close_runs_achievement_check(attendance_repo, clock):
    record = _abandoned(attendance_repo)
    checked = []

    def checker(student_id):
        checked.append(student_id)
        return [6]

    result = _service(attendance_repo, clock, checker).retroactive_close(
        record.record_id, "s1", datetime(2025, 1, 2, 2, 30)
    )

    assert checked == ["s1"]
    assert result.new_achievements == (6,)


def test_forgotten_clock_out_end_to_end(attendance_repo, clock):
    sessions = AttendanceService(attendance_repo, clock=clock)
    retro = RetroactiveCloseService(attendance_repo, sessions)
    sweeper = DailyResetSweeper(attendance_repo, clock=clock)

    clock.set(datetime(2025, 1, 1, 13, 0))
    opened = sessions.clock_action("s1")
    clock.set(datetime(2025, 1, 2, 5, 0))
    assert sweeper.run_daily_sweep().processed_count == 1
    assert sessions.get_open_or_latest("s1").pending_close[0].record_id == opened.record.record_id

    result = retro.retroactive_close(opened.record.record_id, "s1", datetime(2025, 1, 1, 22, 15))

    assert result.record.work_minutes == 555
    assert result.overtime_minutes == 135
    assert sessions.get_open_or_latest("s1").pending_close == ()


def test_clock_out_later_than_now_is_rejected(attendance_repo, clock):
    sessions = AttendanceService(attendance_repo, clock=clock)
    retro = RetroactiveCloseService(attendance_repo, sessions)

    clock.set(datetime(2025, 1, 1, 20, 30))
    opened = sessions.clock_action("s1")
    clock.set(datetime(2025, 1, 1, 20, 31))

    with pytest.raises(FutureClockOutError):
        retro.retroactive_close(opened.record.record_id, "s1", datetime(2025, 1, 2, 4, 59))

    stored = attendance_repo.get(opened.record.record_id)
    assert stored.state == SessionState.OPEN
    assert stored.clock_out is None


def test_clock_out_exactly_now_is_accepted(attendance_repo, clock):
    record = _abandoned(attendance_repo)

    result = _service(attendance_repo, clock, now=datetime(2025, 1, 1, 22, 0, 0, 900)).retroactive_close(
        record.record_id, "s1", datetime(2025, 1, 1, 22, 0)
    )

    assert result.record.clock_out == datetime(2025, 1, 1, 22, 0)


def test_window_is_checked_before_now(attendance_repo, clock):
    record = _abandoned(attendance_repo)

    with pytest.raises(OutOfWindowError):
        _service(attendance_repo, clock, now=datetime(2025, 1, 1, 12, 0)).retroactive_close(
            record.record_id, "s1", datetime(2025, 1, 2, 6, 0)
        )
