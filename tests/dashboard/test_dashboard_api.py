from datetime import date, timedelta


def test_summary_counts(client, login, make_equipment, make_task, make_tool, make_consumable):
    today = date.today()
    eq_id = make_equipment()
    make_task(eq_id, next_due_date=today + timedelta(days=10))
    make_task(eq_id, next_due_date=today + timedelta(days=45))
    make_task(eq_id, next_due_date=today + timedelta(days=5), status="completed")
    make_tool(next_calibration_date=today - timedelta(days=1), status="due_calibration")
    make_tool(next_calibration_date=today - timedelta(days=1), status="out_of_service")
    make_consumable(quantity=1, min_quantity=2)
    make_consumable(quantity=9, min_quantity=2)
    login("VIEWER")

    data = client.get("/api/dashboard/summary").get_json()["data"]
    assert data["summary"] == {
        "upcomingMaintenanceCount": 1,
        "lowInventoryCount": 1,
        "overdueCalibrationsCount": 1,
    }
    kinds = {a["type"] for a in data["recentActivity"]}
    assert kinds == {"equipment", "maintenance"}


def test_recent_activity_limit(client, login, make_equipment):
    for i in range(5):
        make_equipment(name=f"Machine {i}")
    login("VIEWER")
    activity = client.get("/api/dashboard/summary?activityLimit=2").get_json()["data"]["recentActivity"]
    assert len(activity) == 2


def test_status_counts(client, login, make_equipment, make_task):
    eq_id = make_equipment()
    make_equipment(status="maintenance")
    make_task(eq_id, status="pending")
    make_task(eq_id, status="pending")
    make_task(eq_id, status="completed")
    login("OPERATOR")

    data = client.get("/api/dashboard/status-counts").get_json()["data"]
    assert data["equipment"] == {"operational": 1, "maintenance": 1}
    assert data["maintenance"] == {"pending": 2, "completed": 1}


def test_dashboard_requires_login(client):
    assert client.get("/api/dashboard/summary").status_code == 401
