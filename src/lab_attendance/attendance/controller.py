from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_instant, parse_iso_date, to_instant
from ..common.validators import require_non_empty
from ..common.web import admin_required, current_student_id, login_required
from ..core.enums import ClockAction
from ..core.exceptions import ValidationError
from ..container import Container
from .model import AttendanceRecord


def register(app: Flask, container: Container) -> None:
    tz_name = container.tz_name

    def _record_json(record: Optional[AttendanceRecord]) -> Optional[dict]:
        if record is None:
            return None
        return {
            "record_id": record.record_id,
            "student_id": record.student_id,
            "work_date": record.work_date.isoformat(),
            "clock_in": to_instant(record.clock_in, tz_name),
            "clock_out": to_instant(record.clock_out, tz_name),
            "state": record.state.value,
            "work_minutes": record.work_minutes,
            "overtime_minutes": container.attendance_service.overtime_for(record),
        }

    def _rewards_json(reward_ids) -> list[dict]:
        if not reward_ids:
            return []
        return [
            {"reward_id": r.reward_id, "title": r.title, "level": r.level.value, "icon_url": r.icon_url}
            for r in container.achievement_service.describe(list(reward_ids))
        ]

    def _parse_date_arg(name: str):
        value = request.args.get(name)
        if not value:
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"{name} must be YYYY-MM-DD") from None

    @app.route("/api/attendance/clock", methods=["POST"], endpoint="attendance_clock")
    @login_required
    def clock():
        result = container.attendance_service.clock_action(current_student_id())
        clocked_in = result.action == ClockAction.CLOCK_IN
        return jsonify(
            {
                "success": True,
                "action": result.action.value,
                "message": "Clocked in" if clocked_in else "Clocked out",
                "record": _record_json(result.record),
                "work_minutes": result.work_minutes,
                "overtime_minutes": result.overtime_minutes,
                "new_achievements": _rewards_json(result.new_achievements),
            }
        )

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        status = container.attendance_service.get_open_or_latest(current_student_id())
        return jsonify(
            {
                "date": status.today.isoformat(),
                "is_clocked_in": status.is_clocked_in,
                "record": _record_json(status.record),
                "pending_close": [_record_json(r) for r in status.pending_close],
                "today_work_minutes": status.today_work_minutes,
                "today_overtime_minutes": status.today_overtime_minutes,
            }
        )

    @app.route("/api/attendance/records", methods=["GET"], endpoint="attendance_records")
    @login_required
    def records():
        start = _parse_date_arg("start")
        end = _parse_date_arg("end")
        if start and end and start > end:
            raise ValidationError("start must not be after end")

        data = container.report_service.build_student_report(current_student_id(), start=start, end=end)
        return jsonify({"total": len(data.rows), "records": data.rows, "summary": data.summary})

    @app.route(
        "/api/attendance/<int:record_id>/retroactive-close",
        methods=["POST"],
        endpoint="attendance_retroactive_close",
    )
    @login_required
    def retroactive_close(record_id: int):
        payload = request.get_json(silent=True)
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        raw = require_non_empty(str(payload.get("clock_out") or ""), "clock_out")
        clock_out = parse_instant(raw, tz_name)

        result = container.retroactive_service.retroactive_close(record_id, current_student_id(), clock_out)
        return jsonify(
            {
                "success": True,
                "message": "Clock-out recorded",
                "record": _record_json(result.record),
                "work_minutes": result.record.work_minutes,
                "overtime_minutes": result.overtime_minutes,
                "new_achievements": _rewards_json(result.new_achievements),
            }
        )

    @app.route("/api/admin/daily-reset", methods=["POST"], endpoint="admin_daily_reset")
    @admin_required
    def daily_reset():
        result = container.daily_reset_sweeper.run_daily_sweep()
        return jsonify(
            {
                "success": True,
                "processed_count": result.processed_count,
                "failed_count": result.failed_count,
            }
        )
