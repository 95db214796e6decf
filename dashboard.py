"""Dashboard aggregation for a single user.

GET /api/users/<id>/dashboard

All bucketing is plain calendar-date truncation (no timezones). Only buckets
that contain at least one activity are emitted; series are ascending.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta

from flask import Blueprint, jsonify

from models_activity import CATEGORIES, Activity
from models_badges import Badge
from models_goals import Challenge, Goal
from stores import activity_store, user_store


dashboard_api = Blueprint("dashboard_api", __name__)


DAILY_WINDOW_DAYS = 30
WEEKLY_WINDOW_WEEKS = 12
MONTHLY_WINDOW_MONTHS = 12
RECENT_BADGES_LIMIT = 10


def _week_start(d: date) -> date:
    return d - timedelta(days=d.weekday())


def _week_label(d: date) -> str:
    iso_year, week, _ = d.isocalendar()
    return f"{iso_year}-W{week:02d}"


def _months_back(today: date, months: int) -> date:
    # First day of the month `months - 1` months before today's month.
    index = today.year * 12 + (today.month - 1) - (months - 1)
    return date(index // 12, index % 12 + 1, 1)


def _series(buckets: dict, label) -> list[dict]:
    return [
        {"period": label(key), "emissions_kg_co2": float(buckets[key])}
        for key in sorted(buckets)
    ]


def aggregate_emissions(activities, today: date | None = None) -> dict:
    """Fold activities into totals plus daily/weekly/monthly series."""
    today = today or date.today()
    daily_start = today - timedelta(days=DAILY_WINDOW_DAYS - 1)
    weekly_start = _week_start(today) - timedelta(weeks=WEEKLY_WINDOW_WEEKS - 1)
    monthly_start = _months_back(today, MONTHLY_WINDOW_MONTHS)

    by_category = {c: 0.0 for c in CATEGORIES}
    daily = defaultdict(float)
    weekly = defaultdict(float)
    monthly = defaultdict(float)

    for a in activities:
        amount = float(a.emissions_kg_co2 or 0.0)
        if a.category in by_category:
            by_category[a.category] += amount
        d = a.date
        if d is None or d > today:
            continue
        if d >= daily_start:
            daily[d] += amount
        if d >= weekly_start:
            weekly[_week_start(d)] += amount
        if d >= monthly_start:
            monthly[(d.year, d.month)] += amount

    total = by_category["transport"] + by_category["diet"] + by_category["energy"]
    return {
        "total_emissions": total,
        "by_category": by_category,
        "daily": _series(daily, lambda d: d.isoformat()),
        "weekly": _series(weekly, _week_label),
        "monthly": _series(monthly, lambda ym: f"{ym[0]:04d}-{ym[1]:02d}"),
    }


def build_dashboard(user_id: int, today: date | None = None) -> dict:
    user = user_store.read(user_id)
    activities: list[Activity] = activity_store.query(user_id)

    out = {"user": user.to_dict()}
    out.update(aggregate_emissions(activities, today=today))

    goals = (
        Goal.query.filter_by(user_id=user_id, is_achieved=False)
        .order_by(Goal.created_at.desc(), Goal.id.desc())
        .all()
    )
    challenges = (
        Challenge.query.filter_by(user_id=user_id, is_completed=False)
        .order_by(Challenge.created_at.desc(), Challenge.id.desc())
        .all()
    )
    badges = (
        Badge.query.filter_by(user_id=user_id)
        .order_by(Badge.earned_at.desc(), Badge.id.asc())
        .limit(RECENT_BADGES_LIMIT)
        .all()
    )
    out["active_goals"] = [g.to_dict() for g in goals]
    out["active_challenges"] = [c.to_dict() for c in challenges]
    out["recent_badges"] = [b.to_dict() for b in badges]
    return out


@dashboard_api.get("/api/users/<int:user_id>/dashboard")
def api_dashboard(user_id: int):
    return jsonify({"success": True, "dashboard": build_dashboard(user_id)})
