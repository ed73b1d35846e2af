"""Tests for the REST API."""

import pytest
from fastapi.testclient import TestClient

from printtrack import __version__
from printtrack.api import create_app


@pytest.fixture
def client(settings):
    """API client with a fresh database."""
    with TestClient(create_app()) as test_client:
        yield test_client


def signup(client, email="maker@example.com", password="printing42"):
    response = client.post("/api/v1/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth(client):
    """Authorization header for a new account."""
    return signup(client)


@pytest.fixture
def printer_id(client, auth):
    response = client.post("/api/v1/printers", json={"name": "Prusa MK4", "model": "MK4"}, headers=auth)
    assert response.status_code == 201
    return response.json()["id"]


def add_job(client, auth, printer_id, day):
    response = client.post("/api/v1/jobs", json={
        "printer_id": printer_id,
        "name": f"Job {day}",
        "start_time": f"2024-05-0{day}T10:00:00Z",
        "end_time": f"2024-05-0{day}T12:00:00Z",
        "material": "PLA",
        "grams_used": 15,
    }, headers=auth)
    assert response.status_code == 201
    return response.json()


class TestHealth:
    """Tests for health endpoints."""

    def test_health(self, client):
        for path in ("/health", "/api/v1/health"):
            response = client.get(path)
            assert response.status_code == 200
            assert response.json() == {"status": "healthy", "version": __version__}


class TestAuth:
    """Tests for signup and login."""

    def test_signup_and_me(self, client):
        headers = signup(client)
        response = client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["email"] == "maker@example.com"

    def test_duplicate_email(self, client):
        signup(client)
        response = client.post(
            "/api/v1/auth/signup",
            json={"email": "Maker@example.com", "password": "printing42"},
        )
        assert response.status_code == 400

    def test_weak_password(self, client):
        response = client.post("/api/v1/auth/signup", json={"email": "a@example.com", "password": "short"})
        assert response.status_code == 422

    def test_login(self, client):
        signup(client)
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "maker@example.com", "password": "printing42"},
        )
        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"

        response = client.post(
            "/api/v1/auth/login",
            json={"email": "maker@example.com", "password": "wrong-pass1"},
        )
        assert response.status_code == 401

    def test_requires_token(self, client):
        assert client.get("/api/v1/printers").status_code == 401
        response = client.get("/api/v1/printers", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401


class TestPrinters:
    """Tests for printer routes."""

    def test_create_and_get(self, client, auth, printer_id):
        response = client.get(f"/api/v1/printers/{printer_id}", headers=auth)
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Prusa MK4"
        assert data["status"] == "OK"
        assert data["has_octoprint"] is False

    def test_update(self, client, auth, printer_id):
        response = client.patch(f"/api/v1/printers/{printer_id}", json={"notes": "0.6 nozzle"}, headers=auth)
        assert response.status_code == 200
        assert response.json()["notes"] == "0.6 nozzle"
        assert response.json()["name"] == "Prusa MK4"

    def test_other_owner_cannot_see(self, client, auth, printer_id):
        other = signup(client, email="other@example.com")
        assert client.get("/api/v1/printers", headers=other).json() == []
        assert client.get(f"/api/v1/printers/{printer_id}", headers=other).status_code == 404

    def test_delete(self, client, auth, printer_id):
        add_job(client, auth, printer_id, 1)
        assert client.delete(f"/api/v1/printers/{printer_id}", headers=auth).status_code == 204
        assert client.get(f"/api/v1/printers/{printer_id}", headers=auth).status_code == 404
        assert client.get("/api/v1/jobs", headers=auth).json() == []
        assert client.delete(f"/api/v1/printers/{printer_id}", headers=auth).status_code == 404

    def test_octoprint_not_configured(self, client, auth, printer_id):
        response = client.get(f"/api/v1/printers/{printer_id}/octoprint", headers=auth)
        assert response.status_code == 400


class TestJobs:
    """Tests for print job routes."""

    def test_create_with_times(self, client, auth, printer_id):
        job = add_job(client, auth, printer_id, 1)
        assert job["start_time"] == "2024-05-01T10:00:00+00:00"
        assert job["source"] == "manual"

    def test_create_with_duration(self, client, auth, printer_id):
        response = client.post("/api/v1/jobs", json={
            "printer_id": printer_id,
            "name": "Vase",
            "duration_hours": 1,
            "duration_minutes": 30,
        }, headers=auth)
        assert response.status_code == 201
        assert response.json()["end_time"] is not None

    def test_invalid_duration(self, client, auth, printer_id):
        response = client.post("/api/v1/jobs", json={
            "printer_id": printer_id,
            "name": "Vase",
            "duration_minutes": 75,
        }, headers=auth)
        assert response.status_code == 422

    def test_unknown_printer(self, client, auth):
        response = client.post("/api/v1/jobs", json={"printer_id": "missing", "name": "Benchy"}, headers=auth)
        assert response.status_code == 404

    def test_update_and_delete(self, client, auth, printer_id):
        job = add_job(client, auth, printer_id, 1)
        response = client.patch(f"/api/v1/jobs/{job['id']}", json={"status": "Failed"}, headers=auth)
        assert response.json()["status"] == "Failed"

        assert client.delete(f"/api/v1/jobs/{job['id']}", headers=auth).status_code == 204
        assert client.get(f"/api/v1/jobs/{job['id']}", headers=auth).status_code == 404


class TestMaintenance:
    """Tests for maintenance routes."""

    def test_types(self, client):
        names = [t["name"] for t in client.get("/api/v1/maintenance/types").json()]
        assert "Nozzle Clean" in names
        assert "Other" in names

    def test_duplicate_interval(self, client, auth, printer_id):
        payload = {"printer_id": printer_id, "type": "Bed Level", "interval_prints": 10}
        assert client.post("/api/v1/maintenance/intervals", json=payload, headers=auth).status_code == 201
        assert client.post("/api/v1/maintenance/intervals", json=payload, headers=auth).status_code == 409

    def test_interval_needs_threshold(self, client, auth, printer_id):
        payload = {"printer_id": printer_id, "type": "Bed Level"}
        assert client.post("/api/v1/maintenance/intervals", json=payload, headers=auth).status_code == 422
        payload["interval_prints"] = 0
        assert client.post("/api/v1/maintenance/intervals", json=payload, headers=auth).status_code == 422

    def test_unknown_type(self, client, auth, printer_id):
        payload = {"printer_id": printer_id, "type": "Belt Tension"}
        assert client.post("/api/v1/maintenance/logs", json=payload, headers=auth).status_code == 422

    def test_due_flow(self, client, auth, printer_id):
        client.post("/api/v1/maintenance/intervals", json={
            "printer_id": printer_id,
            "type": "Nozzle Clean",
            "interval_prints": 2,
            "interval_hours": 10,
        }, headers=auth)
        add_job(client, auth, printer_id, 1)
        add_job(client, auth, printer_id, 2)

        due = client.get("/api/v1/maintenance/due", headers=auth).json()
        assert len(due) == 1
        assert due[0]["status"] == "Overdue"
        assert due[0]["jobs_since"] == 2
        assert due[0]["hours_since"] == 4.0
        assert due[0]["prints_remaining"] == 0
        assert due[0]["hours_remaining"] == 6.0

        printers = client.get("/api/v1/printers", headers=auth).json()
        assert printers[0]["status"] == "Maintenance Due"

        response = client.post(
            "/api/v1/maintenance/logs/now",
            json={"printer_id": printer_id, "type": "Nozzle Clean"},
            headers=auth,
        )
        assert response.status_code == 201

        due = client.get("/api/v1/maintenance/due", headers=auth).json()
        assert due[0]["status"] == "OK"
        assert due[0]["jobs_since"] == 0
        assert due[0]["prints_remaining"] == 2
        assert due[0]["last_service_date"] is not None

        due = client.get("/api/v1/maintenance/due?include_ok=false", headers=auth).json()
        assert due == []

    def test_update_interval(self, client, auth, printer_id):
        created = client.post("/api/v1/maintenance/intervals", json={
            "printer_id": printer_id, "type": "Lubrication", "interval_hours": 200,
        }, headers=auth).json()
        response = client.patch(
            f"/api/v1/maintenance/intervals/{created['id']}",
            json={"interval_prints": 50},
            headers=auth,
        )
        assert response.status_code == 200
        assert response.json()["interval_prints"] == 50
        assert response.json()["interval_hours"] is None

    def test_log_history(self, client, auth, printer_id):
        for date in ("2024-05-01T08:00:00Z", "2024-05-03T08:00:00Z"):
            client.post("/api/v1/maintenance/logs", json={
                "printer_id": printer_id, "type": "Bed Level", "date": date,
            }, headers=auth)
        logs = client.get(f"/api/v1/maintenance/logs?printer_id={printer_id}", headers=auth).json()
        assert [log["date"][:10] for log in logs] == ["2024-05-03", "2024-05-01"]


class TestDashboardAndExport:
    """Tests for dashboard and CSV export routes."""

    def test_dashboard(self, client, auth, printer_id):
        add_job(client, auth, printer_id, 1)
        data = client.get("/api/v1/dashboard?view=week", headers=auth).json()
        assert data["period"] == "week"
        assert data["has_data"] is True
        assert data["manual_jobs"] == 1
        assert data["grams_by_material"] == [{"material": "PLA", "grams": 15.0}]
        assert data["printers"][0]["status"] == "OK"

    def test_empty_dashboard(self, client, auth):
        data = client.get("/api/v1/dashboard", headers=auth).json()
        assert data["has_data"] is False

    def test_jobs_csv(self, client, auth, printer_id):
        add_job(client, auth, printer_id, 1)
        response = client.get("/api/v1/export/jobs.csv", headers=auth)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "print_jobs.csv" in response.headers["content-disposition"]
        lines = response.text.strip().splitlines()
        assert lines[0].startswith("id,printer,name")
        assert "Prusa MK4" in lines[1]

    def test_maintenance_csv(self, client, auth, printer_id):
        response = client.get("/api/v1/export/maintenance.csv", headers=auth)
        assert response.status_code == 200
        assert response.text.strip() == "id,printer,type,date,notes"
