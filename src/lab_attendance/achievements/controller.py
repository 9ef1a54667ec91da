from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_student_id, login_required
from ..container import Container
from .model import Reward


def _reward_json(reward: Reward) -> dict:
    return {
        "reward_id": reward.reward_id,
        "title": reward.title,
        "description": reward.description,
        "level": reward.level.value,
        "icon_url": reward.icon_url,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reward/all", methods=["GET"], endpoint="reward_all")
    @login_required
    def all_rewards():
        rewards = container.achievement_service.list_all()
        return jsonify(
            {"rewards": [dict(_reward_json(s.reward), earned_count=s.earned_count) for s in rewards]}
        )

    @app.route("/api/reward/my", methods=["GET"], endpoint="reward_my")
    @login_required
    def my_rewards():
        earned = container.achievement_service.list_for_student(current_student_id())
        return jsonify(
            {
                "rewards": [
                    dict(_reward_json(e.reward), earned_at=e.earned_at.isoformat(sep=" "))
                    for e in earned
                ]
            }
        )

    @app.route("/api/reward/check", methods=["POST"], endpoint="reward_check")
    @login_required
    def check():
        granted = container.achievement_service.check_and_grant(current_student_id())
        rewards = container.achievement_service.describe(granted) if granted else []
        return jsonify(
            {
                "message": "New achievements unlocked!" if granted else "Keep going!",
                "new_rewards": [_reward_json(r) for r in rewards],
            }
        )

    @app.route("/api/reward/earners/<int:reward_id>", methods=["GET"], endpoint="reward_earners")
    @login_required
    def earners(reward_id: int):
        earned = container.achievement_service.list_earners(reward_id)
        return jsonify(
            {
                "earners": [
                    {"student_id": e.student_id, "name": e.name, "earned_at": e.earned_at.isoformat(sep=" ")}
                    for e in earned
                ]
            }
        )
