from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from activities import log_diet_activity, log_transport_activity
from badges import award_badge
from challenges import create_challenge, update_challenge_progress
from dashboard import aggregate_emissions, build_dashboard
from errors import NotFound
from goals import create_goal, update_goal_progress


TODAY = date(2026, 3, 15)  # a Sunday


def _activity(category, kg, d):
    return SimpleNamespace(category=category, emissions_kg_co2=kg, date=d)


@pytest.fixture
def history():
    return [
        _activity("transport", 5.0, date(2026, 3, 15)),
        _activity("diet", 2.0, date(2026, 3, 14)),
        _activity("energy", 1.0, date(2026, 3, 9)),
        _activity("transport", 4.0, date(2026, 1, 10)),
        _activity("diet", 3.0, date(2025, 4, 1)),
        _activity("energy", 7.0, date(2025, 3, 31)),
    ]


def test_totals_cover_every_activity(history):
    out = aggregate_emissions(history, today=TODAY)
    assert out["by_category"] == {"transport": 9.0, "diet": 5.0, "energy": 8.0}
    assert out["total_emissions"] == sum(out["by_category"].values())
    assert out["total_emissions"] == pytest.approx(22.0)


def test_daily_series(history):
    out = aggregate_emissions(history, today=TODAY)
    assert out["daily"] == [
        {"period": "2026-03-09", "emissions_kg_co2": 1.0},
        {"period": "2026-03-14", "emissions_kg_co2": 2.0},
        {"period": "2026-03-15", "emissions_kg_co2": 5.0},
    ]


def test_weekly_series_groups_by_iso_week(history):
    out = aggregate_emissions(history, today=TODAY)
    assert out["weekly"] == [
        {"period": "2026-W02", "emissions_kg_co2": 4.0},
        {"period": "2026-W11", "emissions_kg_co2": 8.0},
    ]


def test_monthly_series_trailing_twelve_months(history):
    out = aggregate_emissions(history, today=TODAY)
    assert out["monthly"] == [
        {"period": "2025-04", "emissions_kg_co2": 3.0},
        {"period": "2026-01", "emissions_kg_co2": 4.0},
        {"period": "2026-03", "emissions_kg_co2": 8.0},
    ]


def test_empty_history_is_all_zero():
    out = aggregate_emissions([], today=TODAY)
    assert out["total_emissions"] == 0
    assert out["by_category"] == {"transport": 0.0, "diet": 0.0, "energy": 0.0}
    assert out["daily"] == [] and out["weekly"] == [] and out["monthly"] == []


def test_build_dashboard(user):
    today = date.today()
    log_transport_activity(user.id, "car", 10, today, fuel_type="gasoline")
    log_diet_activity(user.id, "meat", 2, today)

    achieved = create_goal(user.id, "specific_target", "done", 1)
    update_goal_progress(achieved.id, 1)
    open_goal = create_goal(user.id, "specific_target", "open", 100)

    finished = create_challenge(user.id, "meatless_week", "done", 1)
    update_challenge_progress(finished.id, 1)
    open_challenge = create_challenge(user.id, "energy_reduction", "open", 7)

    award_badge(user.id, "first_step", "First Step")

    dash = build_dashboard(user.id)
    assert dash["user"]["id"] == user.id
    assert dash["by_category"]["transport"] == pytest.approx(2.1)
    assert dash["by_category"]["diet"] == pytest.approx(13.22)
    assert dash["by_category"]["energy"] == 0
    assert dash["total_emissions"] == sum(dash["by_category"].values())
    assert [d["period"] for d in dash["daily"]] == [today.isoformat()]

    assert [g["id"] for g in dash["active_goals"]] == [open_goal.id]
    assert [c["id"] for c in dash["active_challenges"]] == [open_challenge.id]
    assert {b["badge_type"] for b in dash["recent_badges"]} == {"diet_champion", "first_step"}


def test_recent_badges_capped_at_ten(user):
    from models_badges import BADGE_TYPES

    for badge_type in BADGE_TYPES:
        award_badge(user.id, badge_type, badge_type.title())
    dash = build_dashboard(user.id)
    assert len(dash["recent_badges"]) == len(BADGE_TYPES)
    assert len(dash["recent_badges"]) <= 10


def test_unknown_user(app):
    with pytest.raises(NotFound):
        build_dashboard(999)


def test_weekly_window_is_twelve_whole_weeks():
    wednesday = date(2026, 3, 18)
    every_day = [_activity("diet", 1.0, wednesday - timedelta(days=n)) for n in range(120)]

    weekly = aggregate_emissions(every_day, today=wednesday)["weekly"]
    assert len(weekly) == 12
    # 2025-12-29 is the Monday of ISO week 2026-W01
    assert weekly[0] == {"period": "2026-W01", "emissions_kg_co2": 7.0}
    # current week so far: Mon..Wed
    assert weekly[-1] == {"period": "2026-W12", "emissions_kg_co2": 3.0}
