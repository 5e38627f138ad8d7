import httpx
from fastapi.testclient import TestClient

from fxform.main import create_app

from .conftest import FakeOxr, make_provider


def _form(amount="4", src="USD", dst="EUR"):
    return {"amount": amount, "from_currency": src, "to_currency": dst}


def test_home_renders_menus_from_catalog(client, fake_oxr):
    resp = client.get("/")
    assert resp.status_code == 200
    html = resp.text
    assert 'id="fromdropdownUSD"' in html and 'id="todropdownJPY"' in html
    assert "AUD - Australian Dollar" in html
    # Default selections
    assert 'id="fromdropdownUSD" value="USD" selected' in html
    assert 'id="todropdownEUR" value="EUR" selected' in html
    assert fake_oxr.paths() == ["/api/currencies.json"]


def test_catalog_loaded_once_per_session(client, fake_oxr):
    client.get("/")
    client.get("/")
    client.post("/", data=_form())
    assert fake_oxr.paths().count("/api/currencies.json") == 1
    assert fake_oxr.paths().count("/api/latest.json") == 1


def test_submit_renders_conversion(client):
    resp = client.post("/", data=_form(amount="4"))
    assert resp.status_code == 200
    html = resp.text
    assert '<p id="specific-result-from">4.00 United States Dollar =</p>' in html
    assert '<p id="specific-result-to">3.36 Euro</p>' in html
    assert '<p id="unit-result-from">1 USD = 0.840000 EUR</p>' in html
    assert '<p id="unit-result-to">1 EUR = 1.190476 USD</p>' in html
    assert 'value="4.00"' in html


def test_invalid_amount_shows_error_and_keeps_results(client):
    client.post("/", data=_form(amount="4"))
    resp = client.post("/", data=_form(amount="lots"))
    assert resp.status_code == 200
    assert "is not a number" in resp.text
    assert "3.36 Euro" in resp.text


def test_unknown_currency_in_form(client):
    resp = client.post("/", data=_form(dst="XYZ"))
    assert "unknown currency" in resp.text


def test_swap_only_flips_selection(client, fake_oxr):
    client.get("/")
    resp = client.post("/swap", data=_form(src="USD", dst="JPY"))
    html = resp.text
    assert 'id="fromdropdownJPY" value="JPY" selected' in html
    assert 'id="todropdownUSD" value="USD" selected' in html
    assert "/api/latest.json" not in fake_oxr.paths()


def test_catalog_failure_leaves_menus_empty_then_recovers(settings):
    oxr = FakeOxr()
    oxr.fail_with = lambda request: httpx.Response(500)
    app = create_app(settings_override=settings, provider_override=make_provider(oxr))
    client = TestClient(app)
    resp = client.get("/")
    assert "Currency list unavailable" in resp.text
    assert "<option" not in resp.text
    assert client.get("/health").json()["catalog_loaded"] is False

    oxr.fail_with = None
    resp = client.get("/")
    assert "Currency list unavailable" not in resp.text
    assert "USD - United States Dollar" in resp.text
    assert client.get("/health").json()["catalog_loaded"] is True


def test_api_currencies(client):
    resp = client.get("/api/currencies")
    assert resp.status_code == 200
    assert list(resp.json()) == ["USD", "EUR", "AUD", "JPY"]


def test_api_convert(client):
    resp = client.get("/api/convert", params={"amount": "4", "from": "usd", "to": "eur"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["result"] == "3.36"
    assert body["unit_forward"] == "0.840000"
    assert body["unit_backward"] == "1.190476"
    assert body["from_name"] == "United States Dollar"
    assert body["base"] == "USD"
    assert body["lines"]["specific_to"] == "3.36 Euro"


def test_api_convert_does_not_touch_page(client):
    client.get("/api/convert", params={"amount": "4", "from": "USD", "to": "EUR"})
    assert "3.36 Euro" not in client.get("/").text


def test_api_errors_are_named(client):
    resp = client.get("/api/convert", params={"amount": "x", "from": "USD", "to": "EUR"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "invalid_amount"

    resp = client.get("/api/convert", params={"amount": "1", "from": "USD", "to": "XYZ"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "unknown_currency"

    resp = client.get("/api/convert", params={"amount": "1", "from": "USD"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


def test_api_provider_down_is_502(settings):
    oxr = FakeOxr()
    oxr.fail_with = lambda request: httpx.Response(503)
    client = TestClient(create_app(settings_override=settings, provider_override=make_provider(oxr)))
    resp = client.get("/api/convert", params={"amount": "1", "from": "USD", "to": "EUR"})
    assert resp.status_code == 502
    assert resp.json()["error"] == "provider_unavailable"


def test_unknown_route_404(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


def test_request_id_header(client):
    resp = client.get("/health", headers={"x-request-id": "abc-123"})
    assert resp.headers["x-request-id"] == "abc-123"
    assert resp.json()["status"] == "ok"


def test_api_infinite_rate_is_provider_error(settings):
    oxr = FakeOxr(latest={"base": "USD", "rates": {"USD": 1, "EUR": 1e400}})
    client = TestClient(create_app(settings_override=settings, provider_override=make_provider(oxr)))
    resp = client.get("/api/convert", params={"amount": "4", "from": "USD", "to": "EUR"})
    assert resp.status_code == 502
    assert resp.json()["error"] == "provider_schema"
