"""
Shared fixtures: a temp env file, a stubbed analytics provider and a
TestClient wired to both.
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from shopadmin.dependencies.services import get_http_client
from shopadmin.main import app
from shopadmin.services.settings import reload_config


SAMPLE_ENV = """APP_NAME="Mega Sky Shop"
APP_ENV=local

# Mail
MAIL_MAILER=log
MAIL_HOST=smtp.example.com
MAIL_PORT=587
MAIL_USERNAME=
MAIL_FROM_ADDRESS=shop@example.com
MAIL_FROM_NAME="Mega Sky Shop"

FACEBOOK_PIXEL_ID=1234567890
FACEBOOK_PIXEL_ACCESS_TOKEN=fb-token
FACEBOOK_PIXEL_DEBUG_MODE=false
FACEBOOK_PIXEL_ENABLED=true

GOOGLE_ANALYTICS_MEASUREMENT_ID=G-TEST123
GOOGLE_ANALYTICS_API_SECRET=ga-secret
GOOGLE_ANALYTICS_DEBUG_MODE=false
GOOGLE_ANALYTICS_ENABLED=true
"""


class StubProvider:
    """
    Records outbound relay requests and answers with a canned response.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body = {"ok": True}
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def env_file(tmp_path, monkeypatch):
    path = tmp_path / ".env"
    path.write_text(SAMPLE_ENV, encoding="utf-8")
    monkeypatch.setenv("SHOPADMIN_ENV_FILE", str(path))
    reload_config()
    yield path
    reload_config()


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def client(env_file, provider):
    def override_http_client():
        with provider.client() as http_client:
            yield http_client

    app.dependency_overrides[get_http_client] = override_http_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
