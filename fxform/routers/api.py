from __future__ import annotations

import logging
from typing import Dict

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import ValidationError

from fxform.core.errors import FxFormError
from fxform.models.currency import ConversionOut, ConversionRequest, CurrencyCatalog
from fxform.services.converter import format_amount
from fxform.services.form import compute_view

"""JSON API over the same provider and converter the form uses.

Endpoints:
    - GET /api/currencies -> catalog, in provider order
    - GET /api/convert    -> full and unit conversions for one amount

Stateless with respect to the page: conversions here never touch the form's
display or selections.
"""

logger = logging.getLogger("fxform.api")

router = APIRouter(prefix="/api", tags=["api"])


@router.get("/currencies", summary="Currency catalog")
async def currencies(request: Request) -> Dict[str, str]:
    page = request.app.state.page
    await page.ensure_loaded()
    return dict(page.catalog)


@router.get("/convert", response_model=ConversionOut, summary="Convert an amount")
async def convert_amount(
    request: Request,
    amount: str = Query("1", description="Amount in the source currency"),
    from_currency: str = Query(..., alias="from", description="Source currency code"),
    to_currency: str = Query(..., alias="to", description="Target currency code"),
):
    page = request.app.state.page
    settings = request.app.state.settings
    try:
        req = ConversionRequest(
            amount=format_amount(amount, settings.amount_decimals),
            from_currency=from_currency,
            to_currency=to_currency,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    try:
        await page.ensure_loaded()
        catalog = page.catalog
    except FxFormError as e:
        # Names are cosmetic here; rates alone are enough to convert
        logger.warning("catalog unavailable for display names: %s", e)
        catalog = CurrencyCatalog({})

    table = await page.provider.fetch_latest()
    view = compute_view(
        0,
        req,
        table.rates,
        catalog,
        amount_decimals=settings.amount_decimals,
        unit_decimals=settings.unit_decimals,
    )
    return ConversionOut(
        amount=view.amount,
        from_currency=view.from_currency,
        to_currency=view.to_currency,
        from_name=catalog.display_name(view.from_currency),
        to_name=catalog.display_name(view.to_currency),
        result=view.full_result,
        unit_forward=view.unit_forward,
        unit_backward=view.unit_backward,
        base=table.base,
        timestamp=table.timestamp,
        lines={
            "specific_from": view.specific_from,
            "specific_to": view.specific_to,
            "unit_from": view.unit_from,
            "unit_to": view.unit_to,
        },
    )
