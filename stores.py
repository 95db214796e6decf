"""Store collaborators consumed by the accounting and gamification modules.

The modules above this layer only see two contracts:
- ActivityStore.create / ActivityStore.query
- UserStore.read / UserStore.increment_points

Nothing outside this file writes users.total_points.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime

from flask import current_app
from sqlalchemy import text

from errors import CarbonTrackerError, NotFound
from extensions import db
from models_activity import Activity
from models_users import User


@contextmanager
def atomic(action: str):
    """Commit everything done inside the block, or none of it."""
    try:
        yield
        db.session.commit()
    except CarbonTrackerError:
        db.session.rollback()
        raise
    except Exception:
        db.session.rollback()
        current_app.logger.exception("%s failed", action)
        raise


class UserStore:
    def read(self, user_id: int) -> User:
        user = db.session.get(User, user_id)
        if user is None:
            raise NotFound(f"User with id {user_id} not found")
        return user

    def increment_points(self, user_id: int, delta: int) -> User:
        # Single UPDATE so concurrent credits cannot lose each other.
        db.session.flush()
        res = db.session.execute(
            text(
                "UPDATE users SET total_points = COALESCE(total_points, 0) + :d, updated_at = :now "
                "WHERE id = :uid"
            ),
            {"d": int(delta), "now": datetime.utcnow(), "uid": user_id},
        )
        if res.rowcount == 0:
            raise NotFound(f"User with id {user_id} not found")
        return db.session.get(User, user_id, populate_existing=True)


class ActivityStore:
    def create(self, activity: Activity) -> Activity:
        db.session.add(activity)
        db.session.flush()  # assigns activity.id
        return activity

    def query(
        self,
        user_id: int,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[Activity]:
        q = Activity.query.filter(Activity.user_id == user_id)
        if category:
            q = q.filter(Activity.category == category)
        if start_date is not None:
            q = q.filter(Activity.date >= start_date)
        if end_date is not None:
            q = q.filter(Activity.date <= end_date)
        return q.order_by(Activity.date.desc(), Activity.created_at.desc(), Activity.id.desc()).all()


user_store = UserStore()
activity_store = ActivityStore()
