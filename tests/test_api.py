"""HTTP tests for the customer, feedback and dashboard endpoints."""
import logging
from datetime import datetime, timedelta

import pytest

from app.crm import create_app
from app.crm.db import create_schema, session_scope
from app.crm.models import AuditEvent
from app.crm.modules.customers.models import Customer
from app.crm.modules.feedback.models import Feedback


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.delenv("RECENT_LIMIT", raising=False)

    app = create_app()
    create_schema(app)

    now = datetime.utcnow()
    with session_scope(app) as s:
        s.add_all(
            [
                Customer(id=1, name="John Smith", email="john@techcorp.com", phone="555-1000", company="Tech Corp",
                         status="active", price=50, has_paid=True, paid_date=now, created_at=now - timedelta(days=400)),
                Customer(id=2, name="Mary Jones", email="mary@acme.io", phone="555-2000", company="Acme",
                         status="inactive", price=300, has_paid=False, created_at=now - timedelta(days=3)),
                Customer(id=3, name="Ravi Patel", email="ravi@globex.com", phone="555-3000", company="Globex",
                         status="active", price=1500, has_paid=False, notes="Wants annual plan",
                         created_at=now - timedelta(hours=1)),
            ]
        )
        s.add_all(
            [
                Feedback(id=10, type="bug_report", status="pending", priority="high", title="Export fails",
                         description="CSV export returns 500", user_name="Ann", user_email="ann@acme.io",
                         system_info={"browser": {"name": "Firefox"}}, created_at=now - timedelta(days=20)),
                Feedback(id=11, type="feature_request", status="under_review", priority="medium",
                         title="Calendar sync", created_at=now - timedelta(days=2)),
                Feedback(id=12, type="general_feedback", status="pending", priority="low",
                         title="Love it", screenshot_urls=["https://img.example/1.png"], created_at=now),
            ]
        )
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json["ok"] is True
    assert client.get("/healthz").status_code == 200


# ---------- Customers ----------
def test_customers_unfiltered_newest_first(client):
    r = client.get("/customers")
    assert r.status_code == 200
    assert [c["id"] for c in r.json["customers"]] == [3, 2, 1]
    assert r.json["total"] == r.json["showing"] == 3
    assert r.json["filters_active"] is False
    assert "1000+" in r.json["filter_options"]["price_range"]
    assert "older" not in r.json["filter_options"]["date_added"]


def test_customers_price_range(client):
    r = client.get("/customers?price_range=101-500")
    assert [c["id"] for c in r.json["customers"]] == [2]
    assert r.json["filters_active"] is True


def test_customers_search_and_payment(client):
    r = client.get("/customers", query_string={"q": "john corp"})
    assert [c["id"] for c in r.json["customers"]] == [1]
    r = client.get("/customers", query_string={"q": "john nomatch"})
    assert r.json["customers"] == []
    r = client.get("/customers?payment_status=pending&status=active")
    assert [c["id"] for c in r.json["customers"]] == [3]


def test_customers_date_added(client):
    assert [c["id"] for c in client.get("/customers?date_added=today").json["customers"]] == [3]
    assert [c["id"] for c in client.get("/customers?date_added=this-week").json["customers"]] == [2]


def test_customers_invalid_filter(client):
    r = client.get("/customers?date_added=older")
    assert r.status_code == 400
    assert r.json["error"] == "invalid_filter"


# ---------- Feedback ----------
def test_feedback_list_filters(client):
    r = client.get("/feedback")
    assert [f["id"] for f in r.json["feedback"]] == [12, 11, 10]
    r = client.get("/feedback?type=bug_report&priority=high")
    assert [f["id"] for f in r.json["feedback"]] == [10]
    r = client.get("/feedback?status=pending&date_range=today")
    assert [f["id"] for f in r.json["feedback"]] == [12]
    r = client.get("/feedback", query_string={"q": "ann export"})
    assert [f["id"] for f in r.json["feedback"]] == [10]


def test_feedback_detail(client):
    r = client.get("/feedback/10")
    assert r.status_code == 200
    assert r.json["feedback"]["system_info"]["browser"]["name"] == "Firefox"
    assert [o["value"] for o in r.json["status_options"]][:2] == ["pending", "under_investigation"]
    assert client.get("/feedback/999").status_code == 404


def test_workflow_endpoint(client):
    r = client.get("/feedback/workflows/feature_request")
    assert r.status_code == 200
    assert r.json["initial"] == "pending"
    assert [s["value"] for s in r.json["statuses"]][-2:] == ["completed", "declined"]
    r = client.get("/feedback/workflows/complaint")
    assert r.status_code == 400
    assert r.json["error"] == "unknown_workflow"


def test_status_change(app, client):
    r = client.post("/feedback/10/status", json={"status": "fixed"}, headers={"X-Actor-Email": "Lead@Example.com"})
    assert r.status_code == 200
    assert r.json["feedback"]["status"] == "fixed"

    with session_scope(app) as s:
        assert s.get(Feedback, 10).status == "fixed"
        ev = s.query(AuditEvent).one()
        assert ev.action == "feedback.status_change"
        assert ev.actor_email == "lead@example.com"


def test_status_change_wrong_workflow(app, client):
    r = client.post("/feedback/11/status", json={"status": "fixed"})
    assert r.status_code == 400
    assert r.json["error"] == "invalid_status"
    with session_scope(app) as s:
        assert s.get(Feedback, 11).status == "under_review"
        assert s.query(AuditEvent).count() == 0


def test_failed_status_change_logged_once(client, caplog):
    caplog.set_level(logging.INFO)
    r = client.post("/feedback/11/status", json={"status": "fixed"})
    assert r.status_code == 400
    failures = [rec for rec in caplog.records if "invalid status" in rec.getMessage().lower()]
    assert len(failures) == 1


def test_status_change_form_and_missing(client):
    r = client.post("/feedback/12/status", data={"status": "acknowledged"})
    assert r.status_code == 200
    assert r.json["feedback"]["status"] == "acknowledged"
    assert client.post("/feedback/404/status", json={"status": "fixed"}).status_code == 404


# ---------- Dashboard ----------
def test_dashboard(client):
    r = client.get("/dashboard")
    assert r.status_code == 200
    stats = r.json["stats"]
    assert stats["total"] == 3
    assert stats["active"] == 2
    assert [c["id"] for c in r.json["recent_customers"]] == [3, 2, 1]
    assert [f["id"] for f in r.json["recent_feedback"]] == [12, 11, 10]
