"""JSON login/logout and a minimal user administration surface."""

import logging

from flask import request
from flask_login import current_user, login_required, login_user, logout_user

from extensions import db, login_manager
from models import User
from modules.auth.schemas import LoginRequest, UserCreate
from permissions import ADMIN, abilities_for, role_required
from repository import DuplicateError
from utils import api_error, api_response

from . import bp

logger = logging.getLogger(__name__)


@login_manager.user_loader
def load_user(user_id: str | None) -> User | None:
    """Resolve a ``User`` instance for Flask-Login sessions."""

    if not user_id:
        return None
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return api_error("Authentication required", 401)


def _me() -> dict:
    data = current_user.to_dict()
    data["abilities"] = {subject: sorted(actions) for subject, actions in abilities_for(current_user.role).items()}
    return data


@bp.route("/login", methods=["POST"])
def login():
    payload = LoginRequest.model_validate(request.get_json(silent=True) or {})
    user = User.query.filter_by(username=payload.username).first()
    if user is None or not user.check_password(payload.password):
        logger.info("Failed login for %s", payload.username)
        return api_error("Invalid username or password", 401)
    login_user(user)
    logger.info("User %s logged in", user.username)
    return api_response(_me())


@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return api_response(message="Logged out")


@bp.route("/me", methods=["GET"])
@login_required
def me():
    return api_response(_me())


@bp.route("/users", methods=["GET"])
@role_required([ADMIN])
def users_list():
    return api_response([u.to_dict() for u in User.query.order_by(User.username).all()])


@bp.route("/users", methods=["POST"])
@role_required([ADMIN])
def user_create():
    payload = UserCreate.model_validate(request.get_json(silent=True) or {})
    if User.query.filter_by(username=payload.username).first() is not None:
        raise DuplicateError("User", "username")
    user = User(username=payload.username, role=payload.role)
    user.set_password(payload.password)
    db.session.add(user)
    db.session.commit()
    logger.info("User %s created with role %s", user.username, user.role)
    return api_response(user.to_dict(), 201)
