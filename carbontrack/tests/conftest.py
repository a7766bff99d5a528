"""
Shared fixtures: a scripted stand-in for the chat-completion gateway, a
PredictionService wired to it, and an ASGI client with that service injected.
"""

import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from carbontrack.services.prediction_service import PredictionService

TEST_MODEL = "test/emissions-model"
TEST_BASE_URL = "https://gateway.test/v1"


def completion_payload(content):
    """Minimal OpenAI chat.completion body with one choice."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": TEST_MODEL,
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


class GatewayStub:
    """Records outbound requests and answers with a scripted response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._respond = lambda request: httpx.Response(200, json=completion_payload("{}"))

    def reply(self, content):
        self._respond = lambda request: httpx.Response(200, json=completion_payload(content))

    def reply_payload(self, payload):
        self._respond = lambda request: httpx.Response(200, json=payload)

    def fail(self, status_code, body=None):
        body = body if body is not None else {"error": {"message": f"status {status_code}"}}
        self._respond = lambda request: httpx.Response(status_code, json=body)

    def disconnect(self):
        def _raise(request):
            raise httpx.ConnectError("connection refused", request=request)
        self._respond = _raise

    @property
    def last_body(self):
        return json.loads(self.requests[-1].content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)


@pytest.fixture
def gateway():
    return GatewayStub()


@pytest.fixture
async def service(gateway):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(gateway))
    yield PredictionService(
        "test-key",
        base_url=TEST_BASE_URL,
        model=TEST_MODEL,
        temperature=0.3,
        http_client=http_client,
    )
    await http_client.aclose()


@pytest.fixture
async def client(service):
    """Async test client for the FastAPI app with the stubbed service injected."""
    from carbontrack.api.routes.predict import get_prediction_service
    from carbontrack.main import app

    app.dependency_overrides[get_prediction_service] = lambda: service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
