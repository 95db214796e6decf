"""Badge registry.

award_badge is the only place badges are created. It is idempotent per
(user_id, badge_type): the second award returns the stored badge and credits
nothing. The unique constraint on badges backs this up when two requests race.

Routes:
- POST /api/badges
- GET  /api/users/<id>/badges
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError

from extensions import db
from models_badges import BADGE_TYPES, Badge
from payloads import parse_choice, parse_int, parse_text
from progress import BADGE_AWARD_POINTS
from stores import atomic, user_store


badges_api = Blueprint("badges_api", __name__)


def _find_badge(user_id: int, badge_type: str) -> Badge | None:
    return Badge.query.filter_by(user_id=user_id, badge_type=badge_type).first()


def grant_badge(user_id: int, badge_type: str, title: str, description: str | None = None) -> tuple[Badge, bool]:
    """Create the badge if absent and credit the owner. Caller owns the transaction.

    Returns (badge, newly_awarded).
    """
    existing = _find_badge(user_id, badge_type)
    if existing is not None:
        return existing, False

    badge = Badge(user_id=user_id, badge_type=badge_type, title=title, description=description)
    try:
        with db.session.begin_nested():
            db.session.add(badge)
            db.session.flush()
            user_store.increment_points(user_id, BADGE_AWARD_POINTS)
    except IntegrityError:
        # Lost a race with a concurrent award of the same type.
        winner = _find_badge(user_id, badge_type)
        if winner is None:
            raise
        return winner, False

    current_app.logger.info(
        "Badge %s awarded to user %s (+%s points)", badge_type, user_id, BADGE_AWARD_POINTS
    )
    return badge, True


def award_badge(user_id: int, badge_type, title, description=None) -> Badge:
    badge_type = parse_choice(badge_type, "badge_type", BADGE_TYPES)
    title = parse_text(title, "title")
    description = parse_text(description, "description", required=False)

    with atomic("Award badge"):
        user_store.read(user_id)
        badge, _ = grant_badge(user_id, badge_type, title, description)
    return badge


def list_user_badges(user_id: int) -> list[Badge]:
    return (
        Badge.query.filter_by(user_id=user_id)
        .order_by(Badge.earned_at.desc(), Badge.id.asc())
        .all()
    )


@badges_api.post("/api/badges")
def api_award_badge():
    data = request.get_json(silent=True) or {}
    user_id = parse_int(data.get("user_id"), "user_id", positive=True)
    badge = award_badge(user_id, data.get("badge_type"), data.get("title"), data.get("description"))
    return jsonify({"success": True, "badge": badge.to_dict()})


@badges_api.get("/api/users/<int:user_id>/badges")
def api_list_badges(user_id: int):
    badges = list_user_badges(user_id)
    return jsonify({"success": True, "badges": [b.to_dict() for b in badges]})
