"""HTTP layer tests: routing, response envelopes and error-kind → status mapping."""

import logging
import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient
from app.dependencies import get_review_service
from app.errors import ConfigurationError, ExtractionError, NotFoundError, UnexpectedStateError, ValidationError
from app.main import app
from app.models.monitor import Monitor
from tests.factories import make_event


@pytest.fixture
def service():
    service = MagicMock()
    service.resolve_frame = AsyncMock(return_value=b"\xff\xd8fake-jpeg")
    app.dependency_overrides[get_review_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


@pytest.fixture
def client(service):
    return TestClient(app, raise_server_exceptions=False)


class TestEventRoutes:
    def test_list_events_wraps_results(self, client, service):
        service.list_events.return_value = [make_event(1, length=Decimal("300.00"), disk_space=2048)]
        resp = client.get("/api/v1/event", params={
            "after": "2024-01-01T00:00:00", "before": "2024-01-02T00:00:00",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["results"][0]["id"] == 1
        assert body["results"][0]["monitor_id"] == 7
        assert body["results"][0]["size"] == 2048
        assert body["results"][0]["duration"] == 300.0
        args = service.list_events.call_args[0]
        assert args[2] is None

    def test_list_events_monitor_filter(self, client, service):
        service.list_events.return_value = []
        client.get("/api/v1/event?after=2024-01-01T00:00:00&before=2024-01-02T00:00:00&monitor=1&monitor=3")
        assert service.list_events.call_args[0][2] == [1, 3]

    def test_validation_error_is_400_with_field(self, client, service):
        service.list_events.side_effect = ValidationError(
            "Start date is after end date", "after", datetime(2024, 1, 2))
        resp = client.get("/api/v1/event", params={
            "after": "2024-01-02T00:00:00", "before": "2024-01-01T00:00:00",
        })
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == 400
        assert body["message"] == "Validation of request failed"
        assert body["errors"][0]["field"] == "after"
        assert body["errors"][0]["rejected_value"] == "2024-01-02T00:00:00"

    def test_get_event_not_found_is_404(self, client, service):
        service.get_event.side_effect = NotFoundError("Event not found", 99)
        resp = client.get("/api/v1/event/99")
        assert resp.status_code == 404
        assert resp.json()["errors"][0]["requested_object"] == 99

    def test_export_streams_video(self, client, service, tmp_path):
        video = tmp_path / "5-video.mp4"
        video.write_bytes(b"\x00\x00\x00\x18ftypmp42")
        service.video_path_for.return_value = str(video)
        resp = client.get("/api/v1/event/5/export")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "video/mp4"
        assert resp.content == b"\x00\x00\x00\x18ftypmp42"

    def test_thumbnail(self, client, service, tmp_path):
        thumb = tmp_path / "snapshot.jpg"
        thumb.write_bytes(b"\xff\xd8thumb")
        service.thumbnail_path_for.return_value = str(thumb)
        resp = client.get("/api/v1/event/5/thumbnail")
        assert resp.status_code == 200
        assert resp.content == b"\xff\xd8thumb"


class TestFrameRoute:
    def test_returns_jpeg(self, client, service):
        resp = client.get("/api/v1/event/frame/7/2024-01-01T10:00:05.5")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/jpeg"
        assert resp.content == b"\xff\xd8fake-jpeg"
        monitor_id, timestamp = service.resolve_frame.call_args[0]
        assert monitor_id == 7
        assert timestamp == datetime(2024, 1, 1, 10, 0, 5, 500000)

    @pytest.mark.parametrize("error, status", [
        (NotFoundError("No event covering the requested time period exists", "t"), 404),
        (ConfigurationError("No media root configured for storage 'nas'", "nas"), 500),
        (ExtractionError("Could not decode frame", "/v.mp4", 10), 500),
    ])
    def test_error_kinds_map_to_status(self, client, service, error, status):
        service.resolve_frame.side_effect = error
        resp = client.get("/api/v1/event/frame/7/2024-01-01T10:00:05")
        assert resp.status_code == status
        assert resp.json()["code"] == status

    def test_invariant_violation_is_generic_500(self, client, service):
        service.resolve_frame.side_effect = UnexpectedStateError("broken", "start")
        resp = client.get("/api/v1/event/frame/7/2024-01-01T10:00:05")
        assert resp.status_code == 500
        assert resp.json()["message"] == "Internal server error"

    @pytest.mark.parametrize("error, level", [
        (ExtractionError("Decoding took longer than 15.0 seconds", "/v.mp4", 10), logging.WARNING),
        (ConfigurationError("No media root configured for storage 'nas'", "nas"), logging.ERROR),
        (NotFoundError("No event covering the requested time period exists", "t"), logging.DEBUG),
    ])
    def test_server_side_failures_logged_above_debug(self, client, service, caplog, error, level):
        caplog.set_level(logging.DEBUG, logger="app.main")
        service.resolve_frame.side_effect = error
        client.get("/api/v1/event/frame/7/2024-01-01T10:00:05")
        records = [r for r in caplog.records if r.name == "app.main" and error.kind.value in r.getMessage()]
        assert [r.levelno for r in records] == [level]

    def test_bad_timestamp_rejected_before_core(self, client, service):
        resp = client.get("/api/v1/event/frame/7/not-a-time")
        assert resp.status_code == 422
        service.resolve_frame.assert_not_called()


class TestMonitorRoute:
    def test_lists_monitors(self, client, service):
        service.list_monitors.return_value = [Monitor(id=1, name="Front door"), Monitor(id=2, name="Yard")]
        resp = client.get("/api/v1/monitor")
        assert resp.status_code == 200
        assert resp.json() == {"results": [{"id": 1, "name": "Front door"}, {"id": 2, "name": "Yard"}]}


class TestHealth:
    def test_reports_database(self):
        resp = TestClient(app).get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json()["database"] == "ok"
