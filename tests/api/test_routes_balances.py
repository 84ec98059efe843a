"""
Tests for leave balance API routes (/api/balances) and the health endpoint.
"""

from unittest.mock import patch


class TestBalances:
    def test_empty(self, client):
        resp = client.get("/api/balances/1")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_grant_then_read(self, client):
        resp = client.put("/api/balances/1/2030/ANNUAL", json={"granted_days": 12})
        assert resp.status_code == 200
        assert resp.json()["granted_days"] == 12.0
        assert resp.json()["available_days"] == 12.0

        balances = client.get("/api/balances/1", params={"year": 2030}).json()
        assert len(balances) == 1
        assert balances[0]["leave_type"] == "ANNUAL"

    def test_grant_untracked_type_is_400(self, client):
        resp = client.put("/api/balances/1/2030/UNPAID", json={"granted_days": 3})
        assert resp.status_code == 400
        assert resp.json()["details"]["field"] == "leave_type"

    def test_grant_negative_rejected_by_schema(self, client):
        resp = client.put("/api/balances/1/2030/ANNUAL", json={"granted_days": -2})
        assert resp.status_code == 422

    def test_accrue_for_hr_employees(self, client):
        resp = client.post("/api/balances/accrue", json={"year": 2030})
        assert resp.status_code == 200
        assert resp.json() == {"year": 2030, "created": 6}

        balances = client.get("/api/balances/2", params={"year": 2030}).json()
        assert {b["leave_type"] for b in balances} == {"ANNUAL", "SICK"}

    def test_accrue_for_listed_employees(self, client):
        resp = client.post("/api/balances/accrue", json={"year": 2030, "employee_ids": [7]})
        assert resp.json()["created"] == 2

    def test_accrue_requires_api_key_when_configured(self, client):
        with patch("vacation.api.auth.get_settings") as mock_settings:
            mock_settings.return_value.api_key = "s3cret"
            resp = client.post("/api/balances/accrue", json={"year": 2030})
        assert resp.status_code == 401


class TestHealth:
    def test_up(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200

        data = resp.json()
        assert data["status"] == "UP"
        assert data["service"] == "erp-vacation"
        assert data["components"]["db"]["status"] == "UP"
        assert data["components"]["httpClients"] == ["hr", "payroll"]
