from __future__ import annotations

import io
import json

import httpx
import pytest

import config.testing as testing_settings
from siabdul.container import build_container
from siabdul.main import create_app


@pytest.fixture
def container():
    c = build_container(testing_settings, transport=httpx.MockTransport(lambda r: httpx.Response(200)), sleep=lambda s: None)
    yield c
    c.close()


@pytest.fixture
def client(container):
    app = create_app(testing_settings, container=container)
    return app.test_client()


@pytest.fixture
def logged_in(client):
    resp = client.post("/login", json={"password": "test-password"})
    assert resp.status_code == 200
    return client


def test_api_requires_login(client):
    resp = client.get("/api/students")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_wrong_password_is_rejected(client):
    assert client.post("/login", json={"password": "nope"}).status_code == 401


def test_scan_flow(logged_in):
    first = logged_in.post("/api/scan", json={"code": "0012345678"})
    assert first.status_code == 200
    assert first.get_json()["outcome"] == "recorded"

    assert logged_in.post("/api/scan", json={"code": "0012345678"}).get_json()["outcome"] == "ignored"
    logged_in.post("/api/scan/next")
    assert logged_in.post("/api/scan", json={"code": "0012345678"}).get_json()["outcome"] == "duplicate"

    unknown = logged_in.post("/api/scan", json={"code": "0000000000"})
    assert unknown.status_code == 404
    assert unknown.get_json()["is_error"] is True


def test_manual_scan_waits_for_full_code(logged_in):
    assert logged_in.post("/api/scan/manual", json={"text": "00123"}).get_json()["pending"] is True
    assert logged_in.post("/api/scan/manual", json={"text": "STU-002", "submit": True}).get_json()["outcome"] == "recorded"


def test_dashboard_and_daily_report(logged_in):
    logged_in.post("/api/scan", json={"code": "0012345679"})

    dash = logged_in.get("/api/dashboard").get_json()
    assert dash["overview"]["total"] == 5
    assert dash["overview"]["present"] == 1
    assert dash["activity"][0]["name"] == "Budi Pratama"

    report = logged_in.get("/api/reports/daily", query_string={"class": "12 IPA 1"}).get_json()
    assert [r["Status"] for r in report["rows"]] == ["No Information", "Present"]

    csv_resp = logged_in.get("/api/reports/daily.csv", query_string={"class": "12 IPA 1"})
    assert csv_resp.mimetype == "text/csv"
    assert csv_resp.data.decode("utf-8-sig").splitlines()[0] == "No,NISN,Name,Class,Date,Time In,Status"


def test_mark_rejects_bad_status(logged_in):
    resp = logged_in.post("/api/attendance/mark", json={"studentId": "STU-001", "status": "holiday"})
    assert resp.status_code == 400

    ok = logged_in.post("/api/attendance/mark", json={"studentId": "STU-001", "status": "alpha"})
    assert ok.get_json()["record"]["status"] == "absent"


def test_student_qr_png(logged_in):
    resp = logged_in.get("/api/students/STU-001/qr.png")

    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert resp.data[:8] == b"\x89PNG\r\n\x1a\n"


def test_csv_import(logged_in):
    data = {
        "class": "8B",
        "file": (io.BytesIO("Name,NISN,ParentPhone\nBaru,0011112222,0812\n,,\n".encode("utf-8")), "siswa.csv"),
    }
    resp = logged_in.post("/api/students/import", data=data, content_type="multipart/form-data")

    body = resp.get_json()
    assert body["imported"] == 1
    assert body["skipped"] == 1
    assert "8B" in logged_in.get("/api/classes").get_json()["classes"]


def test_delete_class_with_students_is_refused(logged_in):
    resp = logged_in.delete("/api/classes/12 IPA 1")
    assert resp.status_code == 400


def test_manual_notify_reports_missing_gateway_url(logged_in):
    logged_in.put("/api/settings/whatsapp", json={"mode": "gateway", "apiUrl": ""})

    resp = logged_in.post("/api/students/STU-001/notify")

    assert resp.status_code == 400
    assert resp.get_json()["outcome"]["status"] == "failed"


def test_manual_notify_in_link_mode_returns_link(logged_in):
    resp = logged_in.post("/api/students/STU-001/notify")

    body = resp.get_json()
    assert body["success"] is True
    assert body["outcome"]["link"].startswith("whatsapp://send?phone=6281234567890")


def test_summary_without_key(logged_in):
    body = logged_in.post("/api/reports/summary", json={}).get_json()

    assert body["status"] == "not_configured"


def test_snapshot_round_trip(logged_in, container):
    exported = logged_in.get("/api/snapshot")
    doc = json.loads(exported.data)
    assert len(doc["students"]) == 5

    doc["students"] = doc["students"][:2]
    refused = logged_in.post("/api/snapshot", json=doc)
    assert refused.status_code == 400

    restored = logged_in.post("/api/snapshot?confirm=true", json=doc)
    assert restored.get_json()["students"] == 2
    assert len(container.roster_repo.list_all()) == 2
