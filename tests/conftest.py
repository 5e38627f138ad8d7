import asyncio
import json
from typing import Callable, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

from fxform.core.config import Settings
from fxform.main import create_app
from fxform.services.rates import OpenExchangeRatesProvider

BASE_URL = "https://oxr.test/api"

# Deliberately not alphabetical: menus must follow provider order
CURRENCIES: Dict[str, str] = {
    "USD": "United States Dollar",
    "EUR": "Euro",
    "AUD": "Australian Dollar",
    "JPY": "Japanese Yen",
}

LATEST = {
    "disclaimer": "Usage subject to terms",
    "license": "https://openexchangerates.org/license",
    "timestamp": 1700000000,
    "base": "USD",
    "rates": {"USD": 1, "EUR": 0.84, "AUD": 1.52, "JPY": 149.5},
}


_open_clients: List[httpx.AsyncClient] = []


def make_provider(handler, app_id="test-key", **kw) -> OpenExchangeRatesProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    _open_clients.append(client)
    return OpenExchangeRatesProvider(app_id, BASE_URL, client=client, **kw)


@pytest.fixture(autouse=True)
def close_mock_clients():
    yield
    clients = list(_open_clients)
    _open_clients.clear()

    async def _close():
        for c in clients:
            await c.aclose()

    if clients:
        # private loop; the pytest-asyncio loop stays current
        loop = asyncio.new_event_loop()
        try:
            loop.run_until_complete(_close())
        finally:
            loop.close()


class FakeOxr:
    """httpx.MockTransport handler that serves canned provider payloads."""

    def __init__(self, currencies=None, latest=None):
        self.currencies = CURRENCIES if currencies is None else currencies
        self.latest = LATEST if latest is None else latest
        self.calls: List[httpx.Request] = []
        self.fail_with: Callable[[httpx.Request], httpx.Response] | None = None

    def paths(self) -> List[str]:
        return [r.url.path for r in self.calls]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.fail_with is not None:
            return self.fail_with(request)
        if request.url.params.get("app_id") != "test-key":
            return httpx.Response(401, json={"error": True, "message": "invalid_app_id"})
        if request.url.path.endswith("/currencies.json"):
            return httpx.Response(200, content=json.dumps(self.currencies))
        if request.url.path.endswith("/latest.json"):
            return httpx.Response(200, content=json.dumps(self.latest))
        return httpx.Response(404, json={"error": True, "message": "not_found"})


@pytest.fixture
def fake_oxr() -> FakeOxr:
    return FakeOxr()


@pytest.fixture
def provider(fake_oxr) -> OpenExchangeRatesProvider:
    return make_provider(fake_oxr)


@pytest.fixture
def settings() -> Settings:
    s = Settings(app_id="test-key", provider_base_url=BASE_URL, debug=False)
    s.init_post_load()
    return s


@pytest.fixture
def client(settings, provider) -> TestClient:
    app = create_app(settings_override=settings, provider_override=provider)
    return TestClient(app)

