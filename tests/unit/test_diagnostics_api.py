"""Unit tests for health, status and setup endpoints."""
import httpx

from callpresence.core.dependencies import get_webhook_registrar
from callpresence.core.exceptions import WebhookRegistrationError
from callpresence.main import app
from callpresence.services.calls.models import CallDirection
from callpresence.services.openphone.webhooks import OpenPhoneWebhookRegistrar


class TestHealthAPI:
    """Test health and status endpoints."""

    def test_health(self, test_client, tracker):
        tracker.on_call_started("c1", "U1")

        response = test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["active_calls"] == 1
        assert "timestamp" in data

    def test_status_lists_active_calls(self, test_client, tracker):
        tracker.on_call_started("c1", "U1", CallDirection.INCOMING)
        tracker.on_call_started("c2", "U2")

        response = test_client.get("/status")

        assert response.status_code == 200
        calls = response.json()["active_calls"]
        assert [call["call_id"] for call in calls] == ["c1", "c2"]
        assert calls[0]["user_id"] == "U1"
        assert calls[0]["direction"] == "incoming"
        assert calls[1]["direction"] is None
        assert calls[0]["duration_ms"] >= 0

    def test_status_empty(self, test_client):
        response = test_client.get("/status")
        assert response.json() == {"active_calls": []}


class TestSetupAPI:
    """Test webhook setup and config check endpoints."""

    def test_setup_webhooks(self, test_client, webhook_registrar):
        """Test setup registers against the configured base URL."""
        for method in (test_client.get, test_client.post):
            response = method("/setup-webhooks")

            assert response.status_code == 200
            data = response.json()
            assert data["success"] is True
            assert data["webhook"]["id"] == "WH123"

        webhook_registrar.register.assert_awaited_with("https://sync.example.com")

    def test_setup_webhooks_failure(self, test_client, webhook_registrar):
        webhook_registrar.register.side_effect = WebhookRegistrationError(
            "OpenPhone API error: 401", {"message": "Unauthorized"}
        )

        response = test_client.post("/setup-webhooks")

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "OpenPhone API error: 401"
        assert data["details"] == {"message": "Unauthorized"}

    def test_config_check(self, test_client, test_settings):
        """Test config check reports presence of settings without values."""
        response = test_client.get("/config-check")

        assert response.status_code == 200
        data = response.json()
        assert data["teams"] == {"tenant_id": True, "client_id": True, "client_secret": True}
        assert data["openphone"]["api_key"] is True
        assert data["openphone"]["signature_verification"] == "enforced"
        assert test_settings.teams_client_secret not in response.text

    def test_setup_webhooks_unexpected_response(self, test_client):
        """Test a non-JSON OpenPhone reply gives the failure body, not a crash."""
        def handler(request):
            return httpx.Response(201, text="ok")

        registrar = OpenPhoneWebhookRegistrar(
            httpx.AsyncClient(transport=httpx.MockTransport(handler)), api_key="test-api-key"
        )
        app.dependency_overrides[get_webhook_registrar] = lambda: registrar

        response = test_client.post("/setup-webhooks")

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "OpenPhone response is not valid JSON"
