from __future__ import annotations

"""Lightweight async HTTP client util with optional retry.

Focus: GET JSON with limited retries. Callers may pass a shared
``httpx.AsyncClient`` (tests inject one backed by ``httpx.MockTransport``);
otherwise a short-lived client is opened per call.
"""
import asyncio
import logging
from typing import Any, Mapping, Optional

import httpx

from fxform.core.logging import redact

logger = logging.getLogger("fxform.http")


class HttpError(Exception):
    pass


class HttpPayloadError(HttpError):
    """Response arrived but its body is not JSON."""


async def _get_once(
    client: httpx.AsyncClient, url: str, params: Optional[Mapping[str, str]]
) -> Any:
    resp = await client.get(url, params=params)
    if resp.status_code >= 400:
        raise HttpError(f"HTTP {resp.status_code} for {redact(str(resp.url))}")
    try:
        return resp.json()
    except ValueError as e:
        raise HttpPayloadError(f"Invalid JSON from {redact(str(resp.url))}: {e}") from e


async def get_json(
    url: str,
    *,
    params: Optional[Mapping[str, str]] = None,
    timeout: float = 5.0,
    retries: int = 0,
    backoff: float = 0.5,
    client: Optional[httpx.AsyncClient] = None,
) -> Any:
    owned = client is None
    http = client or httpx.AsyncClient(timeout=timeout)
    last_err: Optional[Exception] = None
    try:
        for attempt in range(retries + 1):
            try:
                logger.debug("GET %s attempt=%d", url, attempt + 1)
                return await _get_once(http, url, params)
            except HttpPayloadError:
                raise
            except (httpx.HTTPError, HttpError) as e:
                last_err = e
                if attempt == retries:
                    break
                await asyncio.sleep(backoff * (2**attempt))
    finally:
        if owned:
            await http.aclose()
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}")
