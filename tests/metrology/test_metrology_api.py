from datetime import date, timedelta

TOOL = {
    "name": "Height gauge 300 mm",
    "type": "Height gauge",
    "serialNumber": "HG-300-11",
    "manufacturer": "Mitutoyo",
    "calibrationIntervalDays": 365,
}


def test_create_tool_derives_dates(client, login):
    login("MANAGER")
    last = date.today() - timedelta(days=10)
    resp = client.post("/api/metrology/tools", json={**TOOL, "lastCalibrationDate": last.isoformat()})
    assert resp.status_code == 201
    tool = resp.get_json()["data"]
    assert tool["nextCalibrationDate"] == (last + timedelta(days=365)).isoformat()
    assert tool["status"] == "calibrated"
    assert tool["dueStatus"] == "calibrated"
    assert tool["calibrationLogIds"] == []


def test_interval_must_be_positive(client, login):
    login("MANAGER")
    assert client.post("/api/metrology/tools", json={**TOOL, "calibrationIntervalDays": 0}).status_code == 400


def test_operator_reads_but_cannot_calibrate(client, login, make_tool):
    tool_id = make_tool()
    login("OPERATOR")
    assert client.get(f"/api/metrology/tools/{tool_id}").status_code == 200
    resp = client.post(f"/api/metrology/tools/{tool_id}/calibrations",
                       json={"date": "2024-01-01", "performedBy": "QC", "result": "pass"})
    assert resp.status_code == 403


def test_calibration_moves_tool_dates(client, login, make_tool):
    tool_id = make_tool(calibration_interval_days=90, status="due_calibration",
                        next_calibration_date=date.today() - timedelta(days=3))
    login("MANAGER")
    performed = date.today()
    resp = client.post(f"/api/metrology/tools/{tool_id}/calibrations", json={
        "date": performed.isoformat(),
        "performedBy": "Metrology lab",
        "result": "pass",
        "certificateUrl": "https://certs.example/hg-300-11.pdf",
    })
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    expected_next = (performed + timedelta(days=90)).isoformat()
    assert data["log"]["nextDueDate"] == expected_next
    assert data["tool"]["lastCalibrationDate"] == performed.isoformat()
    assert data["tool"]["nextCalibrationDate"] == expected_next
    assert data["tool"]["status"] == "calibrated"
    assert data["tool"]["calibrationLogIds"] == [data["log"]["id"]]

    logs = client.get(f"/api/metrology/tools/{tool_id}/calibrations").get_json()["data"]
    assert [log["result"] for log in logs] == ["pass"]


def test_failed_calibration_takes_tool_out_of_service(client, login, make_tool):
    tool_id = make_tool()
    login("ADMIN")
    resp = client.post(f"/api/metrology/tools/{tool_id}/calibrations",
                       json={"date": date.today().isoformat(), "performedBy": "QC", "result": "fail"})
    assert resp.get_json()["data"]["tool"]["status"] == "out_of_service"


def test_calibration_on_unknown_tool_is_404(client, login):
    login("ADMIN")
    resp = client.post("/api/metrology/tools/missing/calibrations",
                       json={"date": "2024-01-01", "performedBy": "QC", "result": "pass"})
    assert resp.status_code == 404


def test_invalid_result_rejected(client, login, make_tool):
    tool_id = make_tool()
    login("ADMIN")
    resp = client.post(f"/api/metrology/tools/{tool_id}/calibrations",
                       json={"date": "2024-01-01", "performedBy": "QC", "result": "meh"})
    assert resp.status_code == 400


def test_tool_filters(client, login, make_tool):
    today = date.today()
    make_tool(name="Late caliper", next_calibration_date=today - timedelta(days=1), status="due_calibration")
    make_tool(name="Soon bore gauge", next_calibration_date=today + timedelta(days=2), status="due_calibration")
    make_tool(name="Fine indicator", next_calibration_date=today + timedelta(days=200))
    make_tool(name="Broken caliper", next_calibration_date=today - timedelta(days=9), status="out_of_service")
    login("VIEWER")

    def names(query):
        return sorted(t["name"] for t in client.get(f"/api/metrology/tools?{query}").get_json()["data"])

    assert names("overdue=true") == ["Late caliper"]
    assert names("dueSoon=true") == ["Late caliper", "Soon bore gauge"]
    assert names("status=out_of_service") == ["Broken caliper"]
    assert names("search=caliper") == ["Broken caliper", "Late caliper"]


def test_calibration_log_filters(client, login, make_tool):
    first = make_tool(name="A")
    second = make_tool(name="B")
    login("ADMIN")
    client.post(f"/api/metrology/tools/{first}/calibrations",
                json={"date": "2024-02-01", "performedBy": "lab-1", "result": "pass"})
    client.post(f"/api/metrology/tools/{second}/calibrations",
                json={"date": "2024-04-01", "performedBy": "lab-2", "result": "adjusted"})

    def ids(query):
        return [log["metrologyToolId"] for log in client.get(f"/api/metrology/calibrations?{query}").get_json()["data"]]

    assert ids(f"toolId={first}") == [first]
    assert ids("performedBy=lab-2") == [second]
    assert ids("startDate=2024-01-01&endDate=2024-03-01") == [first]
    assert ids("result=adjusted") == [second]
    assert sorted(ids("")) == sorted([first, second])


def test_refresh_endpoint_requires_calibrate(client, login, make_tool):
    make_tool(status="calibrated", next_calibration_date=date.today() - timedelta(days=1))
    login("OPERATOR")
    assert client.post("/api/metrology/tools/refresh").status_code == 403
    login("MANAGER")
    assert client.post("/api/metrology/tools/refresh").get_json()["data"] == {"updated": 1}


def test_update_interval_recomputes_next_date_and_status(client, login, make_tool):
    last = date.today() - timedelta(days=100)
    tool_id = make_tool(last_calibration_date=last, next_calibration_date=last + timedelta(days=365),
                        status="calibrated")
    login("MANAGER")
    resp = client.put(f"/api/metrology/tools/{tool_id}", json={"calibrationIntervalDays": 90})
    assert resp.status_code == 200
    tool = resp.get_json()["data"]
    assert tool["nextCalibrationDate"] == (last + timedelta(days=90)).isoformat()
    assert tool["status"] == "due_calibration"
    assert tool["dueStatus"] == "overdue"


def test_update_last_date_recomputes_next_date(client, login, make_tool):
    tool_id = make_tool(calibration_interval_days=30)
    login("MANAGER")
    last = date.today()
    tool = client.put(f"/api/metrology/tools/{tool_id}",
                      json={"lastCalibrationDate": last.isoformat()}).get_json()["data"]
    assert tool["nextCalibrationDate"] == (last + timedelta(days=30)).isoformat()
    assert tool["status"] == "calibrated"
