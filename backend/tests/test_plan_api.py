from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api.plan import get_formatter  # noqa: E402
from db.database import Base, get_db  # noqa: E402
from main import app  # noqa: E402
from services.date_label_service import DateLabelFormatter  # noqa: E402


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def _override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_formatter] = lambda: DateLabelFormatter("zh-CN")
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health_includes_security_headers(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers.get("x-content-type-options") == "nosniff"
    assert response.headers.get("x-frame-options") == "DENY"


def test_config_uses_defaults(client):
    body = client.get("/api/plan/config").json()
    assert body["start_date"] == "2025-12-16"
    assert body["end_date"] == "2026-03-09"
    assert body["duration_weeks"] == 12
    assert body["total_days"] == 84
    assert isinstance(body["has_started"], bool)
    assert body["days_until_start"] >= 0


def test_day_lookup(client):
    body = client.get("/api/plan/days/2025-12-22").json()
    assert body["day_number"] == 7
    assert body["week_number"] == 1
    assert client.get("/api/plan/days/2025-12-23").json()["week_number"] == 2
    assert client.get("/api/plan/days/2099-01-01").json()["day_number"] == 84
    assert client.get("/api/plan/days/2025-01-01").json()["day_number"] == 0


def test_day_lookup_rejects_garbage(client):
    response = client.get("/api/plan/days/not-a-date")
    assert response.status_code == 400


def test_day_number_lookup(client):
    body = client.get("/api/plan/days/number/1").json()
    assert body["date"] == "2025-12-16"
    assert body["week_number"] == 1
    assert client.get("/api/plan/days/number/84").json()["date"] == "2026-03-09"
    assert client.get("/api/plan/days/number/85").status_code == 400
    assert client.get("/api/plan/days/number/0").status_code == 400


def test_week_lookup(client):
    body = client.get("/api/plan/weeks/12").json()
    assert body["start"] == "2026-03-03"
    assert body["end"] == "2026-03-09"
    assert body["theme"] == "第 12 周学习"
    assert body["category"] == "general"
    assert client.get("/api/plan/weeks/13").status_code == 404


def test_weeks_overview(client):
    body = client.get("/api/plan/weeks").json()
    assert body["duration_weeks"] == 12
    assert len(body["weeks"]) == 12
    assert body["weeks"][0]["start"] == "2025-12-16"


def test_calendar_grid(client):
    body = client.get("/api/plan/calendar", params={"year": 2026, "month": 2}).json()
    assert body["title"] == "2026年2月"
    assert body["weekday_headers"][0] == "周一"
    assert len(body["cells"]) == 42
    assert sum(1 for c in body["cells"] if c["is_current_month"]) == 28
    assert body["cells"][0]["date"] == "2026-01-26"


def test_calendar_defaults_to_current_month(client):
    body = client.get("/api/plan/calendar").json()
    assert len(body["cells"]) == 42
    assert 1 <= body["month"] <= 12


def test_calendar_rejects_invalid_month(client):
    assert client.get("/api/plan/calendar", params={"year": 2026, "month": 13}).status_code == 400


def test_progress_shape(client):
    body = client.get("/api/plan/progress").json()
    assert set(body) == {
        "has_started",
        "week",
        "day_in_week",
        "total_days_elapsed",
        "percentage",
        "days_until_start",
    }
    assert 0 <= body["percentage"] <= 100


def test_settings_roundtrip_changes_plan_mapping(client):
    initial = client.get("/api/settings/plan").json()
    assert initial["overrides"] == {"start_date": None, "duration_weeks": None}

    response = client.put("/api/settings/plan", json={"start_date": "2026-01-05", "duration_weeks": 4})
    assert response.status_code == 200
    assert response.json()["total_days"] == 28
    assert client.get("/api/plan/days/2099-01-01").json()["day_number"] == 28
    assert client.get("/api/plan/days/2026-01-05").json()["day_number"] == 1

    reset = client.delete("/api/settings/plan").json()
    assert reset["removed"] == 2
    assert reset["duration_weeks"] == 12
    assert client.get("/api/plan/days/2099-01-01").json()["day_number"] == 84


def test_settings_update_rejects_invalid_values(client):
    assert client.put("/api/settings/plan", json={"duration_weeks": 0}).status_code == 400
    assert client.put("/api/settings/plan", json={"start_date": "tomorrow"}).status_code == 400
    assert client.get("/api/settings/plan").json()["duration_weeks"] == 12


def test_app_engine_is_in_memory():
    from config import settings
    from db.database import engine

    assert settings.DATABASE_URL == "sqlite://"
    assert engine.url.database in (None, "")
