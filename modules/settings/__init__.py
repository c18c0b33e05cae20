"""Settings module package: the shop's lookup tables."""

from flask import Blueprint

bp = Blueprint("settings", __name__, url_prefix="/api/settings")

from . import models  # noqa: E402  pylint: disable=wrong-import-position
from . import routes  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "models", "routes"]
