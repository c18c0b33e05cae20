def _log(client, task_id, day, performer="Line tech", **extra):
    body = {
        "maintenanceTaskId": task_id,
        "date": day,
        "performedBy": performer,
        "descriptionOfWork": "Replaced way wipers",
        **extra,
    }
    return client.post("/api/maintenance/service-records", json=body)


def test_operator_logs_and_reads_record(client, login, make_equipment, make_task):
    task_id = make_task(make_equipment())
    login("OPERATOR")
    resp = _log(client, task_id, "2024-03-04", cost=42.5, notes="wipers were torn")
    assert resp.status_code == 201
    record = resp.get_json()["data"]
    assert record["maintenanceTaskId"] == task_id
    assert record["cost"] == 42.5

    view = client.get(f"/api/maintenance/service-records/{record['id']}").get_json()["data"]
    assert view["descriptionOfWork"] == "Replaced way wipers"

    task = client.get(f"/api/maintenance/tasks/{task_id}").get_json()["data"]
    assert task["serviceRecordIds"] == [record["id"]]


def test_create_requires_existing_task_and_date(client, login):
    login("MANAGER")
    assert _log(client, "missing", "2024-03-04").status_code == 404
    resp = client.post("/api/maintenance/service-records", json={
        "maintenanceTaskId": "missing", "performedBy": "x", "descriptionOfWork": "y",
    })
    assert resp.status_code == 400


def test_viewer_cannot_log_records(client, login, make_equipment, make_task):
    task_id = make_task(make_equipment())
    login("VIEWER")
    assert _log(client, task_id, "2024-03-04").status_code == 403


def test_record_filters(client, login, make_equipment, make_task):
    first_eq = make_equipment(name="Lathe")
    second_eq = make_equipment(name="Mill")
    first = make_task(first_eq)
    second = make_task(second_eq)
    login("MANAGER")
    _log(client, first, "2024-01-10", performer="anna")
    _log(client, second, "2024-02-20", performer="ben")
    _log(client, second, "2024-04-01", performer="anna")

    def dates(query):
        return [r["date"] for r in client.get(f"/api/maintenance/service-records?{query}").get_json()["data"]]

    assert dates(f"taskId={second}") == ["2024-04-01", "2024-02-20"]
    assert dates("performer=anna") == ["2024-04-01", "2024-01-10"]
    assert dates("startDate=2024-02-01&endDate=2024-03-01") == ["2024-02-20"]
    assert dates(f"equipmentId={first_eq}") == ["2024-01-10"]
    assert dates("startDate=2024-02-01&endDate=nope") == []

    listing = client.get("/api/maintenance/service-records?limit=2").get_json()
    assert listing["pagination"] == {"limit": 2, "offset": 0, "total": 3, "hasMore": True}


def test_update_and_delete_record(client, login, make_equipment, make_task):
    task_id = make_task(make_equipment())
    login("MANAGER")
    record_id = _log(client, task_id, "2024-03-04").get_json()["data"]["id"]

    resp = client.put(f"/api/maintenance/service-records/{record_id}", json={"cost": 10, "notes": "billed"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["cost"] == 10.0
    assert resp.get_json()["data"]["date"] == "2024-03-04"

    assert client.put(f"/api/maintenance/service-records/{record_id}",
                      json={"performedBy": None}).status_code == 400

    assert client.delete(f"/api/maintenance/service-records/{record_id}").status_code == 200
    assert client.get(f"/api/maintenance/service-records/{record_id}").status_code == 404
    assert client.delete(f"/api/maintenance/service-records/{record_id}").status_code == 404


def test_operator_cannot_delete_record(client, login, make_equipment, make_task):
    task_id = make_task(make_equipment())
    login("MANAGER")
    record_id = _log(client, task_id, "2024-03-04").get_json()["data"]["id"]
    login("OPERATOR")
    assert client.delete(f"/api/maintenance/service-records/{record_id}").status_code == 403
