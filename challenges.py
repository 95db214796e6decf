"""Challenge tracker APIs.

Routes:
- POST /api/challenges
- GET  /api/users/<id>/challenges
- POST /api/challenges/<id>/progress
"""

from __future__ import annotations

from datetime import date

from flask import Blueprint, current_app, jsonify, request

from badges import grant_badge
from errors import NotFound
from extensions import db
from models_badges import BADGE_DIET_CHAMPION, BADGE_ECO_WARRIOR, BADGE_TRANSPORT_HERO
from models_goals import (
    CHALLENGE_MEATLESS_WEEK,
    CHALLENGE_PUBLIC_TRANSPORT,
    CHALLENGE_TYPES,
    Challenge,
)
from payloads import parse_choice, parse_date, parse_int, parse_text
from progress import CHALLENGE_COMPLETED_POINTS, fires_once
from stores import atomic, user_store


challenges_api = Blueprint("challenges_api", __name__)


# challenge_type -> (badge_type, title, description)
COMPLETION_BADGES = {
    CHALLENGE_MEATLESS_WEEK: (
        BADGE_DIET_CHAMPION,
        "Diet Champion",
        "Completed a week of plant-based meals",
    ),
    CHALLENGE_PUBLIC_TRANSPORT: (
        BADGE_TRANSPORT_HERO,
        "Transport Hero",
        "Completed a public transport challenge",
    ),
}
DEFAULT_COMPLETION_BADGE = (
    BADGE_ECO_WARRIOR,
    "Eco Warrior",
    "Completed an environmental challenge",
)


def completion_badge_for(challenge_type: str) -> tuple[str, str, str]:
    return COMPLETION_BADGES.get(challenge_type, DEFAULT_COMPLETION_BADGE)


def create_challenge(user_id: int, challenge_type, title, target_days, start_date=None, description=None) -> Challenge:
    challenge_type = parse_choice(challenge_type, "challenge_type", CHALLENGE_TYPES)
    title = parse_text(title, "title")
    description = parse_text(description, "description", required=False)
    target_days = parse_int(target_days, "target_days", positive=True)
    start_date = parse_date(start_date, "start_date", required=False) or date.today()

    with atomic("Create challenge"):
        user_store.read(user_id)
        challenge = Challenge(
            user_id=user_id,
            challenge_type=challenge_type,
            title=title,
            description=description,
            target_days=target_days,
            completed_days=0,
            is_completed=False,
            start_date=start_date,
            end_date=None,
        )
        db.session.add(challenge)
    return challenge


def list_user_challenges(user_id: int) -> list[Challenge]:
    return (
        Challenge.query.filter_by(user_id=user_id)
        .order_by(Challenge.created_at.desc(), Challenge.id.desc())
        .all()
    )


def update_challenge_progress(challenge_id: int, completed_days) -> Challenge:
    """Set completed_days; on first reaching target_days complete the challenge.

    Completion fixes end_date to today, credits CHALLENGE_COMPLETED_POINTS and
    requests the matching badge. All of it commits together or not at all.
    """
    completed_days = parse_int(completed_days, "completed_days", allow_negative=False)

    with atomic("Update challenge progress"):
        challenge = Challenge.query.filter_by(id=challenge_id).with_for_update().first()
        if challenge is None:
            raise NotFound(f"Challenge with id {challenge_id} not found")

        was_completed = bool(challenge.is_completed)
        challenge.completed_days = completed_days
        if fires_once(was_completed, completed_days >= challenge.target_days):
            challenge.is_completed = True
            challenge.end_date = date.today()
            user_store.increment_points(challenge.user_id, CHALLENGE_COMPLETED_POINTS)
            current_app.logger.info(
                "Challenge %s completed by user %s (+%s points)",
                challenge.id, challenge.user_id, CHALLENGE_COMPLETED_POINTS,
            )
            badge_type, badge_title, badge_description = completion_badge_for(challenge.challenge_type)
            grant_badge(challenge.user_id, badge_type, badge_title, badge_description)
    return challenge


@challenges_api.post("/api/challenges")
def api_create_challenge():
    data = request.get_json(silent=True) or {}
    challenge = create_challenge(
        parse_int(data.get("user_id"), "user_id", positive=True),
        data.get("challenge_type"),
        data.get("title"),
        data.get("target_days"),
        start_date=data.get("start_date"),
        description=data.get("description"),
    )
    return jsonify({"success": True, "challenge": challenge.to_dict()}), 201


@challenges_api.get("/api/users/<int:user_id>/challenges")
def api_list_challenges(user_id: int):
    challenges = list_user_challenges(user_id)
    return jsonify({"success": True, "challenges": [c.to_dict() for c in challenges]})


@challenges_api.post("/api/challenges/<int:challenge_id>/progress")
def api_update_challenge_progress(challenge_id: int):
    data = request.get_json(silent=True) or {}
    challenge = update_challenge_progress(challenge_id, data.get("completed_days"))
    return jsonify({"success": True, "challenge": challenge.to_dict()})
