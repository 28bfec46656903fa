"""Shared test fixtures and configuration."""
import base64
import os
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("TEAMS_TENANT_ID", "test-tenant")
os.environ.setdefault("TEAMS_CLIENT_ID", "test-client")
os.environ.setdefault("TEAMS_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("OPENPHONE_API_KEY", "test-api-key")
os.environ["OPENPHONE_WEBHOOK_SECRET"] = ""

from callpresence.main import app
from callpresence.core.config import Settings
from callpresence.core.dependencies import (
    get_call_tracker,
    get_identity_mapper,
    get_presence_setter,
    get_signature_verifier,
    get_webhook_registrar,
)
from callpresence.services.calls.tracker import CallStateTracker
from callpresence.services.identity.mapper import IdentityMapper
from callpresence.services.openphone.webhooks import OpenPhoneWebhookRegistrar
from callpresence.services.presence.base import PresenceSetter
from callpresence.services.signature.verifier import SignatureVerifier, compute_digest
from callpresence.services.sync.orchestrator import SyncOrchestrator

WEBHOOK_SECRET = base64.b64encode(b"openphone-test-signing-key").decode("ascii")

USER_MAPPING = {
    "U1": "alice@example.com",
    "U2": "bob@example.com",
}


def sign(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: str = "1700000000000") -> str:
    """Build an openphone-signature header for ``payload``."""
    digest = compute_digest(timestamp, payload, base64.b64decode(secret))
    return f"hmac;1;{timestamp};{digest}"


def call_event(event_type: str, call_id: str = "c1", user_id: str = "U1", **call_fields) -> dict:
    """Build an OpenPhone call webhook event."""
    return {
        "id": f"EV{call_id}",
        "object": "event",
        "type": event_type,
        "data": {
            "object": {
                "id": call_id,
                "object": "call",
                "userId": user_id,
                "direction": "incoming",
                **call_fields,
            }
        },
    }


@pytest.fixture
def test_settings():
    """Override settings for testing."""
    return Settings(
        teams_tenant_id="test-tenant",
        teams_client_id="test-client",
        teams_client_secret="test-client-secret",
        openphone_api_key="test-api-key",
        openphone_webhook_secret=WEBHOOK_SECRET,
        base_url="https://sync.example.com",
    )


@pytest.fixture
def tracker():
    """Fresh call tracker."""
    return CallStateTracker()


@pytest.fixture
def identity_mapper():
    """Identity mapper with two mapped users."""
    return IdentityMapper(USER_MAPPING)


@pytest.fixture
def presence_setter():
    """Mock presence setter recording directives."""
    setter = AsyncMock(spec=PresenceSetter)
    setter.set_presence.return_value = True
    return setter


@pytest.fixture
def orchestrator(tracker, identity_mapper, presence_setter):
    return SyncOrchestrator(tracker, identity_mapper, presence_setter)


@pytest.fixture
def webhook_registrar():
    registrar = AsyncMock(spec=OpenPhoneWebhookRegistrar)
    registrar.register.return_value = {
        "id": "WH123",
        "url": "https://sync.example.com/webhook/openphone",
        "events": ["call.ringing", "call.completed"],
    }
    return registrar


@pytest.fixture
def test_client(tracker, identity_mapper, presence_setter, webhook_registrar, test_settings, monkeypatch):
    """Create FastAPI test client with overrides and signature verification enforced."""
    app.dependency_overrides[get_call_tracker] = lambda: tracker
    app.dependency_overrides[get_identity_mapper] = lambda: identity_mapper
    app.dependency_overrides[get_presence_setter] = lambda: presence_setter
    app.dependency_overrides[get_webhook_registrar] = lambda: webhook_registrar
    app.dependency_overrides[get_signature_verifier] = lambda: SignatureVerifier(WEBHOOK_SECRET)

    # Override settings in modules that use it
    monkeypatch.setattr("callpresence.core.config.settings", test_settings)
    monkeypatch.setattr("callpresence.api.setup.settings", test_settings)

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()


@pytest.fixture
def unverified_client(test_client):
    """Test client with signature verification disabled."""
    app.dependency_overrides[get_signature_verifier] = lambda: SignatureVerifier(None)
    return test_client


@pytest.fixture
def user_mapping_path():
    """Return path to test user mapping YAML file."""
    return Path(__file__).parent / "fixtures" / "user_mapping.yaml"


@pytest.fixture
def signer():
    """Signature header builder."""
    return sign


@pytest.fixture
def make_event():
    """Call event builder."""
    return call_event
