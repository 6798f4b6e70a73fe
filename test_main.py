# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for Schedule Service HTTP API.
Each test gets a fresh application writing into its own temporary data directory.
"""

import json
import logging
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from main import create_app
from schedule_manager.core.config import Settings, settings as default_settings
from schedule_manager.core.logging import configure_logging
from schedule_manager.middleware import normalize_path
from schedule_manager.services import schedule_service as schedule_service_module

NOW = datetime(2030, 1, 1, 8, 0, tzinfo=timezone.utc)
MONDAY = datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)


def iso(value):
    return value.isoformat()


def schedule_payload(start=MONDAY, minutes=60, **overrides):
    payload = {
        "title": "Planning",
        "description": "Sprint planning",
        "startDate": iso(start),
        "endDate": iso(start + timedelta(minutes=minutes)),
        "category": "work",
        "priority": "high",
        "tags": ["sprint"],
    }
    payload.update(overrides)
    return payload


# ============================================
# Fixtures
# ============================================
@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def client(data_dir):
    app = create_app(Settings(), clock=lambda: NOW)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def created(client):
    response = client.post("/api/schedules", json=schedule_payload())
    assert response.status_code == 201
    return response.json()["data"]


def template_by_name(client, name):
    templates = client.get("/api/templates").json()["data"]
    return next(t for t in templates if t["name"] == name)


# ============================================
# Health & Metrics
# ============================================
class TestHealth:
    def test_health_returns_ok(self, client):
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert data["service"] == "schedule-service"
        assert data["schedules_count"] == 0
        assert data["templates_count"] == 5

    def test_api_health_alias(self, client):
        assert client.get("/api/health").status_code == 200

    def test_readiness(self, client):
        data = client.get("/health/ready").json()
        assert data["status"] == "ready"
        assert data["data_file_exists"] is False
        assert data["templates_loaded"] is True

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, client):
        assert client.get("/health").headers.get("X-Request-ID")

    def test_metrics_endpoint(self, client, created):
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "schedule_requests_total" in response.text
        assert "schedule_schedules_created_total" in response.text


class TestNormalizePath:
    def test_ids_collapsed(self):
        assert normalize_path(f"/api/schedules/{uuid.uuid4()}") == "/api/schedules/{param}"

    def test_static_segments_kept(self):
        assert normalize_path("/api/schedules/export/csv") == "/api/schedules/export/csv"
        assert normalize_path("/api/templates/category/work") == "/api/templates/category/{param}"

    def test_root(self):
        assert normalize_path("/") == "/"


# ============================================
# Schedules: create / read
# ============================================
class TestCreateSchedule:
    def test_create_returns_201(self, client):
        response = client.post("/api/schedules", json=schedule_payload())
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Schedule created"
        data = body["data"]
        uuid.UUID(data["id"])
        assert data["title"] == "Planning"
        assert data["isCompleted"] is False
        assert data["createdAt"] == iso(NOW)
        assert datetime.fromisoformat(data["startDate"]) == MONDAY

    def test_naive_dates_treated_as_utc(self, client):
        payload = schedule_payload(startDate="2030-01-07T09:00:00", endDate="2030-01-07T10:00:00")
        data = client.post("/api/schedules", json=payload).json()["data"]
        assert data["startDate"] == "2030-01-07T09:00:00+00:00"

    def test_offset_dates_converted_to_utc(self, client):
        payload = schedule_payload(startDate="2030-01-07T11:00:00+02:00", endDate="2030-01-07T12:00:00+02:00")
        data = client.post("/api/schedules", json=payload).json()["data"]
        assert data["startDate"] == "2030-01-07T09:00:00+00:00"

    def test_end_before_start_rejected(self, client):
        response = client.post("/api/schedules", json=schedule_payload(minutes=-30))
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_equal_start_end_rejected(self, client):
        assert client.post("/api/schedules", json=schedule_payload(minutes=0)).status_code == 400

    def test_missing_title_rejected(self, client):
        payload = schedule_payload()
        del payload["title"]
        response = client.post("/api/schedules", json=payload)
        assert response.status_code == 400
        fields = [d["field"] for d in response.json()["details"]]
        assert "title" in fields

    def test_title_too_long(self, client):
        assert client.post("/api/schedules", json=schedule_payload(title="x" * 101)).status_code == 400

    def test_description_too_long(self, client):
        assert client.post("/api/schedules", json=schedule_payload(description="x" * 501)).status_code == 400

    def test_invalid_category(self, client):
        assert client.post("/api/schedules", json=schedule_payload(category="party")).status_code == 400

    def test_invalid_priority(self, client):
        assert client.post("/api/schedules", json=schedule_payload(priority="urgent")).status_code == 400

    def test_invalid_repeat_day(self, client):
        payload = schedule_payload(repeatType="weekly", repeatDays=[7])
        assert client.post("/api/schedules", json=payload).status_code == 400

    def test_repeat_days_sorted_and_deduplicated(self, client):
        payload = schedule_payload(repeatType="weekly", repeatDays=[3, 1, 3], repeatEndDate=iso(MONDAY))
        data = client.post("/api/schedules", json=payload).json()["data"]
        assert data["repeatDays"] == [1, 3]

    def test_recurring_creates_occurrences(self, client):
        payload = schedule_payload(
            repeatType="weekly",
            repeatInterval=1,
            repeatDays=[1, 3],
            repeatEndDate=iso(MONDAY + timedelta(days=14)),
        )
        parent = client.post("/api/schedules", json=payload).json()["data"]
        listing = client.get("/api/schedules").json()
        # Wed 9th, Mon 14th, Wed 16th, Mon 21st
        assert listing["total"] == 5
        children = [s for s in listing["data"] if s.get("parentId") == parent["id"]]
        assert [datetime.fromisoformat(c["startDate"]).day for c in children] == [9, 14, 16, 21]

    def test_get_by_id(self, client, created):
        response = client.get(f"/api/schedules/{created['id']}")
        assert response.status_code == 200
        assert response.json()["data"] == created

    def test_get_unknown_returns_404(self, client):
        response = client.get(f"/api/schedules/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Schedule not found"

    def test_get_malformed_id_returns_400(self, client):
        assert client.get("/api/schedules/not-a-uuid").status_code == 400

    def test_persisted_across_restart(self, client, created, data_dir):
        stored = json.loads((data_dir / "schedules.json").read_text(encoding="utf-8"))
        assert stored[0]["id"] == created["id"]
        with TestClient(create_app(Settings())) as second:
            assert second.get(f"/api/schedules/{created['id']}").status_code == 200


# ============================================
# Schedules: list & filters
# ============================================
class TestListSchedules:
    @pytest.fixture(autouse=True)
    def seed(self, client):
        client.post("/api/schedules", json=schedule_payload(
            MONDAY + timedelta(days=2), title="Gym", category="personal", priority="low", tags=["health"]))
        client.post("/api/schedules", json=schedule_payload(MONDAY, title="Planning"))
        client.post("/api/schedules", json=schedule_payload(
            MONDAY + timedelta(days=1), title="Review", description="Code review", tags=["code"]))

    def titles(self, response):
        assert response.status_code == 200
        return [s["title"] for s in response.json()["data"]]

    def test_sorted_by_start(self, client):
        assert self.titles(client.get("/api/schedules")) == ["Planning", "Review", "Gym"]

    def test_total_matches(self, client):
        body = client.get("/api/schedules").json()
        assert body["total"] == len(body["data"]) == 3

    def test_filter_category(self, client):
        assert self.titles(client.get("/api/schedules", params={"category": "personal"})) == ["Gym"]

    def test_filter_priority(self, client):
        assert self.titles(client.get("/api/schedules", params={"priority": "low"})) == ["Gym"]

    def test_invalid_category_filter(self, client):
        assert client.get("/api/schedules", params={"category": "party"}).status_code == 400

    def test_search(self, client):
        assert self.titles(client.get("/api/schedules", params={"search": "CODE"})) == ["Review"]

    def test_tags_comma_separated(self, client):
        response = client.get("/api/schedules", params={"tags": "health,code"})
        assert self.titles(response) == ["Review", "Gym"]

    def test_tags_repeated(self, client):
        response = client.get("/api/schedules", params=[("tags", "health"), ("tags", "code")])
        assert self.titles(response) == ["Review", "Gym"]

    def test_date_range(self, client):
        params = {"startDate": iso(MONDAY + timedelta(days=1)), "endDate": iso(MONDAY + timedelta(days=1, hours=1))}
        assert self.titles(client.get("/api/schedules", params=params)) == ["Review"]

    def test_is_completed(self, client):
        first = client.get("/api/schedules").json()["data"][0]
        client.put(f"/api/schedules/{first['id']}", json={"isCompleted": True})
        assert self.titles(client.get("/api/schedules", params={"isCompleted": "true"})) == ["Planning"]
        assert self.titles(client.get("/api/schedules", params={"isCompleted": "false"})) == ["Review", "Gym"]


# ============================================
# Schedules: update / delete
# ============================================
class TestUpdateSchedule:
    def test_partial_update(self, client, created):
        response = client.put(f"/api/schedules/{created['id']}", json={"isCompleted": True})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["isCompleted"] is True
        assert data["title"] == created["title"]
        assert data["startDate"] == created["startDate"]
        assert data["createdAt"] == created["createdAt"]

    def test_update_title(self, client, created):
        data = client.put(f"/api/schedules/{created['id']}", json={"title": "Renamed"}).json()["data"]
        assert data["title"] == "Renamed"
        assert data["tags"] == ["sprint"]

    def test_update_end_before_start_in_body(self, client, created):
        body = {"startDate": iso(MONDAY), "endDate": iso(MONDAY - timedelta(hours=1))}
        assert client.put(f"/api/schedules/{created['id']}", json=body).status_code == 400

    def test_update_start_past_existing_end(self, client, created):
        body = {"startDate": iso(MONDAY + timedelta(hours=3))}
        response = client.put(f"/api/schedules/{created['id']}", json=body)
        assert response.status_code == 400
        assert response.json()["detail"] == "endDate must be after startDate"

    def test_update_unknown(self, client):
        assert client.put(f"/api/schedules/{uuid.uuid4()}", json={"title": "x"}).status_code == 404

    def test_update_invalid_priority(self, client, created):
        assert client.put(f"/api/schedules/{created['id']}", json={"priority": "meh"}).status_code == 400


class TestDeleteSchedule:
    def test_delete(self, client, created):
        response = client.delete(f"/api/schedules/{created['id']}")
        assert response.status_code == 200
        assert response.json()["status"] == "deleted"
        assert client.get(f"/api/schedules/{created['id']}").status_code == 404

    def test_delete_unknown(self, client):
        assert client.delete(f"/api/schedules/{uuid.uuid4()}").status_code == 404

    def test_bulk_delete(self, client, created):
        ghost = str(uuid.uuid4())
        response = client.request("DELETE", "/api/schedules/bulk", json={"ids": [created["id"], ghost]})
        assert response.status_code == 200
        assert response.json() == {"deletedCount": 1, "errors": [f"Schedule not found: {ghost}"]}

    def test_bulk_delete_requires_ids(self, client):
        assert client.request("DELETE", "/api/schedules/bulk", json={"ids": []}).status_code == 400

    def test_delete_all(self, client, created, data_dir):
        client.post("/api/schedules", json=schedule_payload())
        response = client.delete("/api/schedules/all")
        assert response.status_code == 200
        assert response.json()["deletedCount"] == 2
        assert client.get("/api/schedules").json()["total"] == 0
        assert list(data_dir.glob("schedules_backup_*.json"))


# ============================================
# Analytics, stats, export / import
# ============================================
class TestAnalytics:
    def test_analytics_shape(self, client, created):
        response = client.get("/api/schedules/analytics")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["summary"]["total"] == 1
        assert data["summary"]["completionRate"] == 0
        assert set(data["categoryDistribution"]) == {"work", "personal", "meeting", "reminder", "other"}
        assert data["priorityDistribution"]["high"] == 1
        assert len(data["completionTrend"]) == 7
        assert len(data["monthlyTrend"]) == 6
        assert data["monthlyTrend"][-1] == {"month": "2030-01", "count": 1, "completed": 0}
        assert data["generatedAt"] == iso(NOW)

    def test_analytics_not_captured_by_id_route(self, client):
        assert client.get("/api/schedules/analytics").status_code == 200

    def test_stats(self, client, created):
        data = client.get("/api/schedules/stats").json()["data"]
        assert data["fileExists"] is True
        assert data["scheduleCount"] == 1
        assert data["completedCount"] == 0


class TestExportImport:
    def test_export_json(self, client, created):
        body = client.get("/api/schedules/export/json").json()
        assert body["total"] == 1
        assert body["data"][0]["id"] == created["id"]
        assert body["exportedAt"] == iso(NOW)

    def test_export_csv(self, client, created):
        response = client.get("/api/schedules/export/csv")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        lines = response.text.strip().splitlines()
        assert lines[0].startswith("id,title,description,startDate")
        assert created["id"] in lines[1]

    def test_export_csv_filename_uses_app_clock(self, client):
        response = client.get("/api/schedules/export/csv")
        assert "schedules-export-2030-01-01.csv" in response.headers["content-disposition"]

    def test_export_then_import(self, client, created):
        exported = client.get("/api/schedules/export/json").json()["data"]
        response = client.post("/api/schedules/import", json={"schedules": exported})
        assert response.status_code == 200
        body = response.json()
        assert body["importedCount"] == 1
        assert body["errorCount"] == 0
        listing = client.get("/api/schedules").json()["data"]
        assert len({s["id"] for s in listing}) == 2

    def test_import_partial(self, client):
        records = [schedule_payload(), {"title": "broken"}]
        body = client.post("/api/schedules/import", json={"schedules": records}).json()
        assert body["importedCount"] == 1
        assert body["errorCount"] == 1
        assert body["errors"][0].startswith("Record 1")

    def test_import_requires_list(self, client):
        assert client.post("/api/schedules/import", json={"schedules": "nope"}).status_code == 400


# ============================================
# Templates
# ============================================
class TestTemplates:
    def test_defaults_seeded_and_sorted(self, client):
        body = client.get("/api/templates").json()
        assert body["total"] == 5
        names = [t["name"] for t in body["data"]]
        assert names == sorted(names, key=str.casefold)

    def test_seeding_can_be_disabled(self, data_dir, monkeypatch):
        monkeypatch.setenv("SEED_DEFAULT_TEMPLATES", "false")
        with TestClient(create_app(Settings())) as c:
            assert c.get("/api/templates").json()["total"] == 0

    def test_create_and_get(self, client):
        payload = {"name": "Deep work", "category": "work", "priority": "high", "duration": 90}
        response = client.post("/api/templates", json=payload)
        assert response.status_code == 201
        template = response.json()["data"]
        assert client.get(f"/api/templates/{template['id']}").json()["data"]["name"] == "Deep work"

    def test_create_invalid_duration(self, client):
        payload = {"name": "Marathon", "category": "personal", "priority": "low", "duration": 1441}
        assert client.post("/api/templates", json=payload).status_code == 400

    def test_get_unknown(self, client):
        response = client.get(f"/api/templates/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Template not found"

    def test_by_category(self, client):
        body = client.get("/api/templates/category/meeting").json()
        assert body["total"] == 2
        assert all(t["category"] == "meeting" for t in body["data"])

    def test_by_invalid_category(self, client):
        assert client.get("/api/templates/category/party").status_code == 400

    def test_update(self, client):
        template = template_by_name(client, "Exercise")
        response = client.put(f"/api/templates/{template['id']}", json={"duration": 60})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["duration"] == 60
        assert data["name"] == "Exercise"

    def test_delete(self, client):
        template = template_by_name(client, "Exercise")
        assert client.delete(f"/api/templates/{template['id']}").status_code == 200
        assert client.delete(f"/api/templates/{template['id']}").status_code == 404

    def test_duplicate_default_name(self, client):
        template = template_by_name(client, "1on1")
        response = client.post(f"/api/templates/{template['id']}/duplicate")
        assert response.status_code == 201
        assert response.json()["data"]["name"] == "1on1 (copy)"

    def test_duplicate_with_name(self, client):
        template = template_by_name(client, "1on1")
        response = client.post(f"/api/templates/{template['id']}/duplicate", json={"name": "Skip-level"})
        assert response.json()["data"]["name"] == "Skip-level"

    def test_use_template(self, client):
        template = template_by_name(client, "Weekly Team Meeting")
        response = client.post(f"/api/templates/{template['id']}/use", json={"startDate": iso(MONDAY)})
        assert response.status_code == 201
        schedule = response.json()["data"]
        assert schedule["title"] == "Weekly Team Meeting"
        assert schedule["repeatType"] == "none"
        end = datetime.fromisoformat(schedule["endDate"])
        assert end - datetime.fromisoformat(schedule["startDate"]) == timedelta(minutes=60)
        # template repeat settings are not expanded
        assert client.get("/api/schedules").json()["total"] == 1

    def test_use_unknown_template(self, client):
        response = client.post(f"/api/templates/{uuid.uuid4()}/use", json={"startDate": iso(MONDAY)})
        assert response.status_code == 404

    def test_from_schedule(self, client, created):
        response = client.post(f"/api/templates/from-schedule/{created['id']}", json={"name": "Planning tpl"})
        assert response.status_code == 201
        template = response.json()["data"]
        assert template["duration"] == 60
        assert template["category"] == "work"
        assert client.get("/api/templates").json()["total"] == 6

    def test_from_unknown_schedule(self, client):
        response = client.post(f"/api/templates/from-schedule/{uuid.uuid4()}", json={"name": "x"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Schedule not found"

    def test_malformed_template_id(self, client):
        assert client.get("/api/templates/123").status_code == 400


# ============================================
# Persistence failures
# ============================================
class TestPersistenceFailure:
    def test_write_failure_returns_500_and_keeps_memory(self, client, monkeypatch):
        container = client.app.state.container
        monkeypatch.setattr(container.schedule_repo, "persist", lambda: False)
        response = client.post("/api/schedules", json=schedule_payload())
        assert response.status_code == 500
        assert response.json()["error"] == "persistence_failure"
        assert client.get("/api/schedules").json()["total"] == 1


# ============================================
# Logging
# ============================================
class TestLogging:
    def test_app_settings_drive_service_loggers(self, data_dir, monkeypatch):
        monkeypatch.setenv("SERVICE_NAME", "planner")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        service_logger = schedule_service_module.logger
        try:
            create_app(Settings(), clock=lambda: NOW)
            assert service_logger.level == logging.WARNING
            record = service_logger.makeRecord(
                service_logger.name, logging.WARNING, __file__, 1, "hello", (), None
            )
            line = json.loads(service_logger.handlers[0].formatter.format(record))
            assert line["service"] == "planner"
            assert line["message"] == "hello"
        finally:
            configure_logging(default_settings)
