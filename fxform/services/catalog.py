"""Currency catalog loading.

Fetches the provider's currency list once and renders it into the two
selection menus. The returned CurrencyCatalog is the only copy of the
catalog; callers thread it into the form controller.
"""

from __future__ import annotations

import logging

from fxform.models.currency import CurrencyCatalog
from fxform.models.form import CurrencyMenu, CurrencyOption
from .rates import RateProvider

logger = logging.getLogger("fxform.catalog")


def make_option(menu_id: str, code: str, name: str) -> CurrencyOption:
    return CurrencyOption(option_id=menu_id + code, value=code, label=f"{code} - {name}")


def populate_menus(
    catalog: CurrencyCatalog, from_menu: CurrencyMenu, to_menu: CurrencyMenu
) -> None:
    for code, name in catalog.items():
        from_menu.append(make_option(from_menu.menu_id, code, name))
        to_menu.append(make_option(to_menu.menu_id, code, name))


async def load_currencies(
    provider: RateProvider, from_menu: CurrencyMenu, to_menu: CurrencyMenu
) -> CurrencyCatalog:
    """Fetch the catalog and append one option per currency to both menus.

    Provider errors propagate before either menu is touched.
    """
    catalog = await provider.fetch_currencies()
    populate_menus(catalog, from_menu, to_menu)
    logger.info("loaded %d currencies into menus", len(catalog))
    return catalog
