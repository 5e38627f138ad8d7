from __future__ import annotations

"""Rate provider abstraction and the Open Exchange Rates implementation.

Every payload is validated at this boundary; callers only ever see a
CurrencyCatalog / RateTable or one of the named provider errors.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from fxform.core.config import Settings
from fxform.core.errors import ProviderSchemaError, ProviderUnavailableError
from fxform.models.currency import CurrenciesPayload, CurrencyCatalog, RateTable
from .http_client import HttpError, HttpPayloadError, get_json

logger = logging.getLogger("fxform.rates")

OXR_BASE_URL = "https://openexchangerates.org/api"


class RateProvider(ABC):
    @abstractmethod
    async def fetch_currencies(self) -> CurrencyCatalog:
        """Return the provider's catalog of code -> display name."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_latest(self) -> RateTable:
        """Return current rates relative to the provider's base currency."""
        raise NotImplementedError


class OpenExchangeRatesProvider(RateProvider):
    def __init__(
        self,
        app_id: Optional[str],
        base_url: str = OXR_BASE_URL,
        *,
        timeout: float = 5.0,
        retries: int = 0,
        backoff: float = 0.5,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._app_id = app_id
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._retries = retries
        self._backoff = backoff
        self._client = client

    async def _fetch(self, endpoint: str) -> Any:
        if not self._app_id:
            raise ProviderUnavailableError("no app_id configured for Open Exchange Rates")
        url = f"{self._base_url}/{endpoint}"
        try:
            return await get_json(
                url,
                params={"app_id": self._app_id},
                timeout=self._timeout,
                retries=self._retries,
                backoff=self._backoff,
                client=self._client,
            )
        except HttpPayloadError as e:
            raise ProviderSchemaError(str(e)) from e
        except HttpError as e:
            logger.warning("provider request failed: %s", e)
            raise ProviderUnavailableError(str(e)) from e

    async def fetch_currencies(self) -> CurrencyCatalog:
        data = await self._fetch("currencies.json")
        try:
            payload = CurrenciesPayload.model_validate(data)
        except ValidationError as e:
            raise ProviderSchemaError(f"unexpected currencies.json shape: {e}") from e
        logger.debug("catalog fetched: %d currencies", len(payload.root))
        return CurrencyCatalog(payload.root)

    async def fetch_latest(self) -> RateTable:
        data = await self._fetch("latest.json")
        try:
            table = RateTable.model_validate(data)
        except ValidationError as e:
            raise ProviderSchemaError(f"unexpected latest.json shape: {e}") from e
        logger.debug("rates fetched: base=%s count=%d", table.base, len(table.rates))
        return table


def make_rate_provider(
    settings: Settings, client: Optional[httpx.AsyncClient] = None
) -> RateProvider:
    return OpenExchangeRatesProvider(
        settings.app_id,
        settings.provider_root,
        timeout=settings.http_timeout_seconds,
        retries=settings.http_retries,
        backoff=settings.http_backoff_seconds,
        client=client,
    )
