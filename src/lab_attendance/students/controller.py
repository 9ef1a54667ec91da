from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        payload = request.get_json(silent=True) or request.form
        s_student = container.auth_service.authenticate(
            str(payload.get("student_id", "")),
            str(payload.get("password", "")),
        )

        session.clear()
        session["student_id"] = s_student.student_id
        session["name"] = s_student.name
        session["role"] = s_student.role.value
        session["team_id"] = s_student.team_id

        return jsonify(
            {
                "success": True,
                "student": {
                    "student_id": s_student.student_id,
                    "name": s_student.name,
                    "role": s_student.role.value,
                    "team_id": s_student.team_id,
                },
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/profile", methods=["GET"], endpoint="auth_profile")
    @login_required
    def profile():
        return jsonify(
            {
                "student_id": session.get("student_id"),
                "name": session.get("name"),
                "role": session.get("role"),
                "team_id": session.get("team_id"),
            }
        )
