from datetime import date, datetime
from typing import Optional

from flask import current_app, jsonify, request


def utcnow() -> datetime:
    """Current naive UTC time, matching how timestamps are stored."""
    return datetime.utcnow()


def today() -> date:
    """Current calendar date as request handlers see it."""
    return date.today()


def parse_date(value) -> Optional[date]:
    """Coerce a date, datetime or ISO string to a date. Returns None when it can't."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        # fromisoformat only understands a trailing "Z" from Python 3.11 on
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text)
        except ValueError:
            return None
    return None


def parse_datetime(value) -> Optional[datetime]:
    """Like ``parse_date`` but keeps the time of day; dates become midnight."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def iso(value) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def int_arg(name: str, default: Optional[int] = None, minimum: int = 0) -> Optional[int]:
    """Read an integer query-string argument, falling back to ``default``."""
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(value, minimum)


def bool_arg(name: str) -> bool:
    return (request.args.get(name) or "").lower() in ("1", "true", "yes")


def page_args() -> tuple[int, int]:
    limit = int_arg("limit", current_app.config.get("DEFAULT_PAGE_SIZE", 50), minimum=1)
    offset = int_arg("offset", 0)
    return limit, offset


def api_response(data=None, status: int = 200, **extra):
    payload = {"success": True}
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    return jsonify(payload), status


def api_error(message: str, status: int, details=None):
    payload = {"success": False, "error": message}
    if details is not None:
        payload["details"] = details
    return jsonify(payload), status


def paginated(items: list, total: int, limit: int, offset: int):
    return api_response(
        items,
        pagination={
            "limit": limit,
            "offset": offset,
            "total": total,
            "hasMore": offset + len(items) < total,
        },
    )


def lead_days() -> int:
    return current_app.config.get("DUE_SOON_LEAD_DAYS", 7)
