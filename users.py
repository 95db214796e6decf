"""User directory APIs.

Routes:
- POST /api/users
- GET  /api/users/<id>
"""

from flask import Blueprint, jsonify, request
from sqlalchemy.exc import IntegrityError

from errors import ValidationFailure
from extensions import db
from models_users import User
from payloads import is_valid_email, parse_text
from stores import user_store


users_api = Blueprint("users_api", __name__)


def create_user(username: str, email: str) -> User:
    username = parse_text(username, "username", min_length=3)
    email = (parse_text(email, "email") or "").lower()
    if not is_valid_email(email):
        raise ValidationFailure("email must be a valid address")

    user = User(username=username, email=email, total_points=0)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValidationFailure("username or email is already registered")
    return user


def get_user(user_id: int) -> User:
    return user_store.read(user_id)


@users_api.post("/api/users")
def api_create_user():
    data = request.get_json(silent=True) or {}
    user = create_user(data.get("username"), data.get("email"))
    return jsonify({"success": True, "user": user.to_dict()}), 201


@users_api.get("/api/users/<int:user_id>")
def api_get_user(user_id: int):
    return jsonify({"success": True, "user": get_user(user_id).to_dict()})
