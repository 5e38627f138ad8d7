"""Process-wide page session: the form's menus, input, display and catalog.

The catalog is loaded on first use and kept for the lifetime of the session.
A failed load leaves the menus empty; the next render tries again.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from fxform.core.config import Settings
from fxform.models.currency import CurrencyCatalog
from fxform.models.form import AmountField, ConversionDisplay, CurrencyMenu
from .catalog import load_currencies
from .converter import format_amount
from .form import ConversionFormController
from .rates import RateProvider

FROM_MENU_ID = "fromdropdown"
TO_MENU_ID = "todropdown"


class PageSession:
    def __init__(self, provider: RateProvider, settings: Settings):
        self.provider = provider
        self.settings = settings
        self.from_menu = CurrencyMenu(FROM_MENU_ID)
        self.to_menu = CurrencyMenu(TO_MENU_ID)
        self.amount_field = AmountField(format_amount(1, settings.amount_decimals))
        self.display = ConversionDisplay()
        self.catalog: Optional[CurrencyCatalog] = None
        self.controller: Optional[ConversionFormController] = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self.catalog is not None

    async def ensure_loaded(self) -> ConversionFormController:
        """Load the catalog once; raises the provider error if loading fails."""
        async with self._lock:
            if self.controller is not None:
                return self.controller
            catalog = await load_currencies(self.provider, self.from_menu, self.to_menu)
            self._apply_default_selection(catalog)
            self.catalog = catalog
            self.controller = ConversionFormController(
                self.provider,
                catalog,
                self.from_menu,
                self.to_menu,
                self.amount_field,
                self.display,
                amount_decimals=self.settings.amount_decimals,
                unit_decimals=self.settings.unit_decimals,
            )
            return self.controller

    def _apply_default_selection(self, catalog: CurrencyCatalog) -> None:
        if self.settings.default_from_currency in catalog:
            self.from_menu.select_value(self.settings.default_from_currency)
        if self.settings.default_to_currency in catalog:
            self.to_menu.select_value(self.settings.default_to_currency)
