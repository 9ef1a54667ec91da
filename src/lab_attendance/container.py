from __future__ import annotations

from dataclasses import dataclass
from functools import partial

from .achievements.mysql_achievement_repository import MySQLAchievementRepository
from .achievements.service import AchievementService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.retroactive import RetroactiveCloseService
from .attendance.service import AttendanceService
from .attendance.sweeper import DailyResetSweeper
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_SWEEP_BATCH_SIZE, DEFAULT_SWEEP_GRACE_MINUTES, DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .overtime.calculator.standard_calculator import StandardOvertimeCalculator
from .reports.service import OvertimeReportService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    tz_name: str

    students_repo: MySQLStudentRepository
    attendance_repo: MySQLAttendanceRepository
    achievements_repo: MySQLAchievementRepository

    auth_service: AuthService
    attendance_service: AttendanceService
    retroactive_service: RetroactiveCloseService
    achievement_service: AchievementService
    report_service: OvertimeReportService
    daily_reset_sweeper: DailyResetSweeper


def build_container(
    *,
    db_config: dict,
    tz_name: str = DEFAULT_TIMEZONE,
    sweep_grace_minutes: int = DEFAULT_SWEEP_GRACE_MINUTES,
    sweep_batch_size: int = DEFAULT_SWEEP_BATCH_SIZE,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    clock = partial(now_local, tz_name)
    calculator = StandardOvertimeCalculator()

    students_repo = MySQLStudentRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    achievements_repo = MySQLAchievementRepository(conn)

    auth_service = AuthService(students_repo, clock=clock)
    achievement_service = AchievementService(achievements_repo, attendance_repo, calculator=calculator, clock=clock)
    attendance_service = AttendanceService(
        attendance_repo,
        calculator=calculator,
        clock=clock,
        achievement_checker=achievement_service.check_and_grant,
    )
    retroactive_service = RetroactiveCloseService(attendance_repo, attendance_service)
    report_service = OvertimeReportService(attendance_repo, calculator=calculator, tz_name=tz_name)
    daily_reset_sweeper = DailyResetSweeper(
        attendance_repo,
        clock=clock,
        grace_minutes=sweep_grace_minutes,
        batch_size=sweep_batch_size,
    )

    return Container(
        conn=conn,
        tz_name=tz_name,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        achievements_repo=achievements_repo,
        auth_service=auth_service,
        attendance_service=attendance_service,
        retroactive_service=retroactive_service,
        achievement_service=achievement_service,
        report_service=report_service,
        daily_reset_sweeper=daily_reset_sweeper,
    )
