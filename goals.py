"""Goal tracker APIs.

Routes:
- POST /api/goals
- GET  /api/users/<id>/goals
- POST /api/goals/<id>/progress

A goal is in progress until current_value reaches target_value, then it is
achieved for good. Setting a goal earns GOAL_CREATED_POINTS; achieving it
earns GOAL_ACHIEVED_POINTS exactly once.
"""

from __future__ import annotations

from datetime import date

from flask import Blueprint, current_app, jsonify, request

from errors import NotFound, ValidationFailure
from extensions import db
from models_goals import GOAL_TYPES, Goal
from payloads import parse_choice, parse_date, parse_int, parse_number, parse_text
from progress import GOAL_ACHIEVED_POINTS, GOAL_CREATED_POINTS, fires_once
from stores import atomic, user_store


goals_api = Blueprint("goals_api", __name__)


def create_goal(user_id: int, goal_type, title, target_value, start_date=None, end_date=None, description=None) -> Goal:
    goal_type = parse_choice(goal_type, "goal_type", GOAL_TYPES)
    title = parse_text(title, "title")
    description = parse_text(description, "description", required=False)
    target_value = parse_number(target_value, "target_value", positive=True)
    start_date = parse_date(start_date, "start_date", required=False) or date.today()
    end_date = parse_date(end_date, "end_date", required=False)
    if end_date is not None and end_date < start_date:
        raise ValidationFailure("end_date must not be before start_date")

    with atomic("Create goal"):
        user_store.read(user_id)
        goal = Goal(
            user_id=user_id,
            goal_type=goal_type,
            title=title,
            description=description,
            target_value=target_value,
            current_value=0.0,
            is_achieved=False,
            start_date=start_date,
            end_date=end_date,
        )
        db.session.add(goal)
        db.session.flush()
        user_store.increment_points(user_id, GOAL_CREATED_POINTS)
    return goal


def list_user_goals(user_id: int) -> list[Goal]:
    return (
        Goal.query.filter_by(user_id=user_id)
        .order_by(Goal.created_at.desc(), Goal.id.desc())
        .all()
    )


def update_goal_progress(goal_id: int, current_value) -> Goal:
    current_value = parse_number(current_value, "current_value")

    with atomic("Update goal progress"):
        goal = Goal.query.filter_by(id=goal_id).with_for_update().first()
        if goal is None:
            raise NotFound(f"Goal with id {goal_id} not found")

        was_achieved = bool(goal.is_achieved)
        goal.current_value = current_value
        if fires_once(was_achieved, current_value >= goal.target_value):
            goal.is_achieved = True
            user_store.increment_points(goal.user_id, GOAL_ACHIEVED_POINTS)
            current_app.logger.info(
                "Goal %s achieved by user %s (+%s points)", goal.id, goal.user_id, GOAL_ACHIEVED_POINTS
            )
    return goal


@goals_api.post("/api/goals")
def api_create_goal():
    data = request.get_json(silent=True) or {}
    goal = create_goal(
        parse_int(data.get("user_id"), "user_id", positive=True),
        data.get("goal_type"),
        data.get("title"),
        data.get("target_value"),
        start_date=data.get("start_date"),
        end_date=data.get("end_date"),
        description=data.get("description"),
    )
    return jsonify({"success": True, "goal": goal.to_dict()}), 201


@goals_api.get("/api/users/<int:user_id>/goals")
def api_list_goals(user_id: int):
    goals = list_user_goals(user_id)
    return jsonify({"success": True, "goals": [g.to_dict() for g in goals]})


@goals_api.post("/api/goals/<int:goal_id>/progress")
def api_update_goal_progress(goal_id: int):
    data = request.get_json(silent=True) or {}
    goal = update_goal_progress(goal_id, data.get("current_value"))
    return jsonify({"success": True, "goal": goal.to_dict()})
