import pytest

from errors import NotFound, ValidationFailure
from extensions import db
from goals import create_goal, list_user_goals, update_goal_progress
from models_goals import Goal
from stores import user_store


def test_create_goal_credits_setting_bonus(user, points):
    goal = create_goal(user.id, "specific_target", "Cycle more", 30, start_date="2026-03-01")
    assert goal.current_value == 0
    assert goal.is_achieved is False
    assert goal.end_date is None
    assert points(user.id) == 10


def test_goal_achieved_once(user, points):
    goal = create_goal(user.id, "specific_target", "Cycle more", 30)

    goal = update_goal_progress(goal.id, 30)
    assert goal.is_achieved is True
    assert points(user.id) == 110

    goal = update_goal_progress(goal.id, 35)
    assert goal.current_value == 35
    assert goal.is_achieved is True
    assert points(user.id) == 110


def test_progress_may_decrease_without_unachieving(user, points):
    goal = create_goal(user.id, "percentage_reduction", "Cut 20%", 20)
    update_goal_progress(goal.id, 25)
    goal = update_goal_progress(goal.id, 5)
    assert goal.current_value == 5
    assert goal.is_achieved is True
    assert points(user.id) == 110


def test_below_target_stays_in_progress(user, points):
    goal = create_goal(user.id, "eco_challenge", "Almost", 10)
    goal = update_goal_progress(goal.id, 9.5)
    assert goal.is_achieved is False
    assert points(user.id) == 10


def test_unknown_goal(app):
    with pytest.raises(NotFound):
        update_goal_progress(404, 1)


def test_create_goal_validation(user):
    with pytest.raises(ValidationFailure):
        create_goal(user.id, "bogus", "x", 10)
    with pytest.raises(ValidationFailure):
        create_goal(user.id, "specific_target", "x", 0)
    with pytest.raises(ValidationFailure):
        create_goal(user.id, "specific_target", "", 10)
    with pytest.raises(ValidationFailure):
        create_goal(user.id, "specific_target", "x", 10, start_date="2026-03-10", end_date="2026-03-01")


def test_create_goal_unknown_user(app):
    with pytest.raises(NotFound):
        create_goal(999, "specific_target", "x", 10)


def test_list_user_goals(user):
    first = create_goal(user.id, "specific_target", "first", 10)
    second = create_goal(user.id, "specific_target", "second", 10)
    assert [g.id for g in list_user_goals(user.id)] == [second.id, first.id]
    assert list_user_goals(999) == []


def test_failed_bonus_rolls_back_achievement(user, points, monkeypatch):
    goal = create_goal(user.id, "specific_target", "Cycle more", 30)

    def boom(user_id, delta):
        raise RuntimeError("points ledger unavailable")

    monkeypatch.setattr(user_store, "increment_points", boom)
    with pytest.raises(RuntimeError):
        update_goal_progress(goal.id, 30)
    monkeypatch.undo()

    reloaded = db.session.get(Goal, goal.id, populate_existing=True)
    assert reloaded.is_achieved is False
    assert reloaded.current_value == 0
    assert points(user.id) == 10

    # the edge still fires once the failure is gone
    update_goal_progress(goal.id, 30)
    assert points(user.id) == 110
