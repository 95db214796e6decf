"""Shared fixtures: a fresh in-memory database per test."""

import os

# Must be set before `app` is imported; app.py builds a default app at import time.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("FLASK_ENV", "testing")

import pytest

from app import create_app
from extensions import db
from models_users import User
from users import create_user


TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "SQLALCHEMY_ENGINE_OPTIONS": {},
    "RATELIMIT_ENABLED": False,
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(app):
    return create_user("alice", "alice@example.com")


@pytest.fixture
def points():
    """Read a user's committed point balance."""

    def _points(user_id):
        return db.session.get(User, user_id, populate_existing=True).total_points

    return _points
