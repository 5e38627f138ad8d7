import json
import os
import sys

from fastapi.testclient import TestClient

"""Smoke script against the live Open Exchange Rates API.

Requires APP_ID in the environment (or .env). Loads the form page, submits a
USD -> EUR conversion and prints the JSON API answer for the same pair.

NOTE: This is a manual diagnostic and not a formal test.
"""


def run(amount: str = "4", src: str = "USD", dst: str = "EUR"):
    from fxform.core.config import Settings
    from fxform.main import create_app

    settings = Settings(debug=True)
    settings.init_post_load()
    if not settings.app_id:
        sys.exit("APP_ID is not set")
    client = TestClient(create_app(settings_override=settings))

    page = client.get("/")
    assert page.status_code == 200, page.text
    assert f'id="fromdropdown{src}"' in page.text, "catalog did not load"

    form = client.post(
        "/", data={"amount": amount, "from_currency": src, "to_currency": dst}
    )
    assert 'id="specific-result-to">' in form.text

    api = client.get("/api/convert", params={"amount": amount, "from": src, "to": dst})
    print(json.dumps(api.json(), indent=2))
    assert api.status_code == 200
    print("Conversion smoke test: PASS")


if __name__ == "__main__":
    sys.path.append(os.getcwd())
    run(*sys.argv[1:4])
