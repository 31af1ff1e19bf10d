"""
Shared fixtures: settings factory, a scripted upstream (AI providers + Supabase)
behind httpx.MockTransport, and an ASGI client wired to both.
"""
import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from core.config import Settings, get_settings
from core.http import get_http_client

SUPABASE_URL = "https://proj.supabase.co"


def make_settings(**overrides: Any) -> Settings:
    values: Dict[str, Any] = dict(
        gemini_api_key="gem-key",
        openrouter_api_key="or-key",
        azure_endpoint="https://example.openai.azure.com/",
        azure_api_key="az-key",
        supabase_url=SUPABASE_URL,
        supabase_anon_key="anon-key",
        supabase_service_role_key="",
        public_dir="/nonexistent",
    )
    values.update(overrides)
    return Settings(**values)


def azure_ok(text: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": text}}]})


def openrouter_ok(text: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": text}}]})


def gemini_ok(text: str) -> httpx.Response:
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def provider_of(request: httpx.Request) -> Optional[str]:
    host = request.url.host
    if "azure" in host:
        return "azure"
    if host == "openrouter.ai":
        return "openrouter"
    if host == "generativelanguage.googleapis.com":
        return "gemini"
    return None


class Upstream:
    """
    Scripted stand-in for every outbound service.
    Register responders keyed by provider name ("azure", "openrouter", "gemini")
    or by "METHOD /path" for Supabase; every request is recorded.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.responders: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def on(self, key: str, responder):
        if isinstance(responder, httpx.Response):
            resp = responder
            responder = lambda request: resp  # noqa: E731
        self.responders[key] = responder
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = provider_of(request) or f"{request.method} {request.url.path}"
        responder = self.responders.get(key)
        if responder is None:
            return httpx.Response(599, json={"error": {"message": f"unexpected call: {key}"}})
        return responder(request)

    def calls_to(self, key: str) -> List[httpx.Request]:
        return [r for r in self.requests if (provider_of(r) or f"{r.method} {r.url.path}") == key]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def body_of(request: httpx.Request) -> Any:
    return json.loads(request.content.decode("utf-8")) if request.content else None


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
async def http(upstream):
    async with upstream.client() as client:
        yield client


@pytest.fixture
async def api(upstream, settings):
    """ASGI client for the app with settings and outbound HTTP overridden."""
    from main import app

    async def _client_override():
        async with upstream.client() as client:
            yield client

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = _client_override
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
