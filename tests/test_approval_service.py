from datetime import time

from timecard.codec import timesheet_to_dict
from timecard.controller import blank_timesheet
from timecard.day import apply_day
from timecard.models import TimeInterval
from timecard.pay_periods import EPOCH, make_period

PERIOD = make_period(EPOCH)


def submission(employee="Avery Lane", **extra):
    timesheet = blank_timesheet(PERIOD, employee)
    for index in (1, 2, 8):
        timesheet.day(index).intervals[0] = TimeInterval(time(9, 0), time(17, 0))
        apply_day(timesheet.day(index))
    payload = {
        "employeeName": employee,
        "payPeriod": PERIOD.label,
        "timesheetData": timesheet_to_dict(timesheet),
        "employeeSignatureDate": "2025-11-15",
    }
    payload.update(extra)
    return payload


def submit(api, **extra):
    response = api.post("/api/timesheets/submit", json=submission(**extra))
    assert response.status_code == 201
    return response.json()["id"]


def test_health(api):
    response = api.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_supervisors_list_is_public(api, supervisor):
    response = api.get("/api/supervisors/list")

    assert response.json() == {"success": True, "supervisors": [{"id": supervisor["id"], "name": "Jordan Doe"}]}


def test_login_rejects_bad_password(api, supervisor):
    response = api.post("/api/auth/login", json={"username": "jdoe", "password": "wrong"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid credentials"}


def test_review_endpoints_require_bearer_token(api):
    response = api.get("/api/timesheets/pending")

    assert response.status_code == 401
    assert response.json()["success"] is False

    response = api.get("/api/timesheets/pending", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


def test_submitted_timesheet_is_pending_with_total_hours(api, auth_headers):
    timesheet_id = submit(api)

    response = api.get("/api/timesheets/pending", headers=auth_headers)

    assert response.status_code == 200
    rows = response.json()["timesheets"]
    assert [row["id"] for row in rows] == [timesheet_id]
    assert rows[0]["employee_name"] == "Avery Lane"
    assert rows[0]["pay_period"] == PERIOD.label
    assert rows[0]["total_hours"] == 24.0
    assert rows[0]["status"] == "pending"


def test_approve_moves_timesheet_and_blocks_second_review(api, auth_headers):
    timesheet_id = submit(api)
    body = {"supervisorSignature": "J. Doe", "supervisorSignatureDate": "2025-11-17"}

    response = api.post(f"/api/timesheets/{timesheet_id}/approve", json=body, headers=auth_headers)
    assert response.json() == {"success": True}

    detail = api.get(f"/api/timesheets/{timesheet_id}", headers=auth_headers).json()["timesheet"]
    assert detail["status"] == "approved"
    assert detail["supervisor_signature"] == "J. Doe"
    assert detail["approved_at"]
    assert api.get("/api/timesheets/pending", headers=auth_headers).json()["timesheets"] == []
    assert len(api.get("/api/timesheets/approved", headers=auth_headers).json()["timesheets"]) == 1

    again = api.post(f"/api/timesheets/{timesheet_id}/reject", json={"reason": "late"}, headers=auth_headers)
    assert again.status_code == 409
    assert again.json() == {"success": False, "error": "Timesheet is already approved"}


def test_reject_records_reason(api, auth_headers):
    timesheet_id = submit(api)

    api.post(f"/api/timesheets/{timesheet_id}/reject", json={"reason": "Missing Friday"}, headers=auth_headers)

    rows = api.get("/api/timesheets/rejected", headers=auth_headers).json()["timesheets"]
    assert rows[0]["rejection_reason"] == "Missing Friday"
    assert rows[0]["rejected_at"]


def test_invalid_timesheet_data_is_rejected(api):
    payload = submission()
    payload["timesheetData"]["week1"][0]["dayType"] = "sick"

    response = api.post("/api/timesheets/submit", json=payload)

    assert response.status_code == 422
    assert response.json()["success"] is False
    assert "Unknown day type" in response.json()["error"]


def test_missing_fields_render_error_envelope(api):
    response = api.post("/api/timesheets/submit", json={"payPeriod": PERIOD.label})

    assert response.status_code == 422
    assert response.json()["success"] is False
    assert response.json()["error"]


def test_unknown_supervisor_is_rejected(api):
    response = api.post("/api/timesheets/submit", json=submission(supervisorId=999))

    assert response.status_code == 422


def test_delete_and_missing_timesheet(api, auth_headers):
    timesheet_id = submit(api)

    assert api.delete(f"/api/timesheets/{timesheet_id}", headers=auth_headers).json() == {"success": True}

    response = api.get(f"/api/timesheets/{timesheet_id}", headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Timesheet not found"}


def test_logout_invalidates_token(api, auth_headers):
    assert api.post("/api/auth/logout", headers=auth_headers).json() == {"success": True}

    assert api.get("/api/timesheets/pending", headers=auth_headers).status_code == 401


def test_malformed_time_pairs_are_rejected(api):
    payload = submission()
    payload["timesheetData"]["week1"][0]["timePairs"] = ["09:00-17:00"]

    response = api.post("/api/timesheets/submit", json=payload)

    assert response.status_code == 422
    assert response.json()["success"] is False


def test_non_finite_hours_are_rejected(api):
    payload = submission()
    payload["timesheetData"]["week1"][0]["hoursEntries"] = [{"hours": "inf", "description": ""}]

    response = api.post("/api/timesheets/submit", json=payload)

    assert response.status_code == 422
    assert response.json()["success"] is False
