"""Metrology module package: measuring instruments and their calibration history."""

from flask import Blueprint

bp = Blueprint("metrology", __name__, url_prefix="/api/metrology")

from . import models  # noqa: E402  pylint: disable=wrong-import-position
from . import routes  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "models", "routes"]
