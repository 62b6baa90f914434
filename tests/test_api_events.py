"""
Tests for event_proxy/api/events.py — the HTTP front door for SendGrid webhooks.
"""
import json

import pytest
from fastapi.testclient import TestClient

from event_proxy.api.events import get_event_handler
from event_proxy.main import create_app


@pytest.fixture
def client(event_handler):
    app = create_app()
    app.dependency_overrides[get_event_handler] = lambda: event_handler
    return TestClient(app)


class TestEmailEventsWebhook:
    def test_authenticated_batch(self, client, mock_publisher, bounce_event, delivered_event):
        resp = client.post(
            "/v1/events",
            params={"auth": "s3cret-token"},
            json=[bounce_event, delivered_event, {"event": "bounce"}],
        )

        assert resp.status_code == 200
        assert resp.text == "Processed 2 events"
        assert mock_publisher.publish.await_count == 2

    def test_wrong_auth_is_401(self, client, mock_publisher, bounce_event):
        resp = client.post("/v1/events", params={"auth": "wrong"}, json=[bounce_event])

        assert resp.status_code == 401
        assert resp.text == "Unauthorized"
        mock_publisher.publish.assert_not_awaited()

    def test_missing_auth_is_401(self, client, bounce_event):
        resp = client.post("/v1/events", json=[bounce_event])
        assert resp.status_code == 401

    def test_invalid_json_is_500(self, client):
        resp = client.post(
            "/v1/events",
            params={"auth": "s3cret-token"},
            content=b"{oops",
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 500
        assert resp.text == "Internal Server Error"

    def test_publish_failure_is_500(self, client, mock_publisher, spam_event):
        mock_publisher.publish.side_effect = ConnectionError("down")

        resp = client.post("/v1/events", params={"auth": "s3cret-token"}, json=spam_event)

        assert resp.status_code == 500
        assert resp.text == "Internal Server Error"

    def test_echoes_correlation_id(self, client, spam_event):
        resp = client.post(
            "/v1/events",
            params={"auth": "s3cret-token"},
            json=spam_event,
            headers={"X-Correlation-ID": "cid-123"},
        )
        assert resp.headers["X-Correlation-ID"] == "cid-123"

    def test_invalid_utf8_body_is_500_and_publishes_nothing(self, client, mock_publisher, bounce_event):
        body = json.dumps([bounce_event]).encode("utf-8").replace(b"bounced@", b"bounc\xffd@")

        resp = client.post(
            "/v1/events",
            params={"auth": "s3cret-token"},
            content=body,
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 500
        assert resp.text == "Internal Server Error"
        mock_publisher.publish.assert_not_awaited()

    def test_empty_body_without_auth_is_401(self, client, mock_publisher):
        resp = client.post("/v1/events", content=b"")

        assert resp.status_code == 401
        mock_publisher.publish.assert_not_awaited()

    def test_empty_body_with_auth_is_empty_batch(self, client, mock_publisher):
        resp = client.post("/v1/events", params={"auth": "s3cret-token"}, content=b"")

        assert resp.status_code == 200
        assert resp.text == "Processed 0 events"
        mock_publisher.publish.assert_not_awaited()
