from flask import current_app

from permissions import permission_required
from repository import get_unit_of_work
from utils import api_response, int_arg, today

from . import bp


@bp.route("/summary", methods=["GET"])
@permission_required("read", "Dashboard")
def summary():
    dashboard = get_unit_of_work().dashboard
    days = current_app.config.get("UPCOMING_MAINTENANCE_DAYS", 30)
    return api_response({
        "summary": dashboard.summary(today(), days),
        "recentActivity": dashboard.recent_activity(int_arg("activityLimit", 10, minimum=1)),
    })


@bp.route("/status-counts", methods=["GET"])
@permission_required("read", "Dashboard")
def status_counts():
    dashboard = get_unit_of_work().dashboard
    return api_response({
        "equipment": dashboard.equipment_status_counts(),
        "maintenance": dashboard.maintenance_status_counts(),
    })
