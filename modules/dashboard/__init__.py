"""Dashboard aggregates module package."""

from flask import Blueprint

bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")

from . import routes  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "routes"]
