"""Unit tests for OpenPhone webhook registration."""
import json

import httpx
import pytest

from callpresence.core.exceptions import WebhookRegistrationError
from callpresence.services.openphone.webhooks import OpenPhoneWebhookRegistrar


def build_registrar(handler, api_key="test-api-key"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenPhoneWebhookRegistrar(client, api_key=api_key)


class TestOpenPhoneWebhookRegistrar:
    """Test webhook creation."""

    @pytest.mark.asyncio
    async def test_register(self):
        """Test the webhook is created for ringing and completed events."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(201, json={"data": {"id": "WH123", "url": "x"}})

        registrar = build_registrar(handler)
        webhook = await registrar.register("https://sync.example.com/")

        assert webhook["id"] == "WH123"
        (request,) = requests
        assert str(request.url) == "https://api.openphone.com/v1/webhooks"
        assert request.headers["Authorization"] == "test-api-key"
        assert json.loads(request.content) == {
            "url": "https://sync.example.com/webhook/openphone",
            "events": ["call.ringing", "call.completed"],
        }

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        def handler(request):
            raise AssertionError("no request expected")

        registrar = build_registrar(handler, api_key=None)
        with pytest.raises(WebhookRegistrationError):
            await registrar.register("https://sync.example.com")

    @pytest.mark.asyncio
    async def test_api_error(self):
        def handler(request):
            return httpx.Response(400, json={"message": "Invalid url"})

        registrar = build_registrar(handler)
        with pytest.raises(WebhookRegistrationError) as exc_info:
            await registrar.register("https://sync.example.com")

        assert exc_info.value.response_data == {"message": "Invalid url"}

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        registrar = build_registrar(handler)
        with pytest.raises(WebhookRegistrationError):
            await registrar.register("https://sync.example.com")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(201, text="ok"),
            httpx.Response(201, json=["WH123"]),
            httpx.Response(201, json={"data": "WH123"}),
        ],
        ids=["text", "list", "non-object-data"],
    )
    async def test_unexpected_response_body(self, response):
        """Test unusable success bodies raise a registration error."""
        def handler(request):
            return response

        registrar = build_registrar(handler)
        with pytest.raises(WebhookRegistrationError):
            await registrar.register("https://sync.example.com")
