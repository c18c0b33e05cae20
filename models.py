"""Shared SQLAlchemy models."""

import uuid
from datetime import datetime

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from extensions import db


def new_id() -> str:
    """Opaque string identifier used by every domain entity."""
    return str(uuid.uuid4())


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class User(UserMixin, db.Model):
    """Represents an authenticated application user."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(50), nullable=False, default="VIEWER")  # ADMIN, MANAGER, OPERATOR, VIEWER

    def set_password(self, raw: str) -> None:
        self.password = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        return check_password_hash(self.password, raw)

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "role": self.role}

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<User {self.username}>"
