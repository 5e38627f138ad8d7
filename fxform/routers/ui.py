import logging
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from fxform.core.errors import FxFormError, UnknownCurrencyError
from fxform.models.form import CurrencyMenu
from fxform.services.page import PageSession

logger = logging.getLogger("fxform.ui")

router = APIRouter(tags=["ui"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


def _render(request: Request, page: PageSession, errors: List[str]) -> HTMLResponse:
    context = {
        "version": request.app.state.settings.version,
        "from_menu": page.from_menu,
        "to_menu": page.to_menu,
        "amount": page.amount_field.value,
        "display": page.display,
        "errors": errors,
        "catalog_loaded": page.loaded,
    }
    return templates.TemplateResponse(request, "index.html", context)


async def _load(page: PageSession, errors: List[str]):
    try:
        return await page.ensure_loaded()
    except FxFormError as e:
        # Menus stay empty; the next page render retries the catalog
        logger.warning("catalog load failed: %s", e)
        errors.append(f"Currency list unavailable: {e}")
        return None


def _select(menu: CurrencyMenu, code: Optional[str]) -> None:
    if not code:
        return
    code = code.strip().upper()
    if menu.get(menu.menu_id + code) is None:
        raise UnknownCurrencyError(code)
    menu.select_value(code)


@router.get("/", response_class=HTMLResponse)
async def ui_home(request: Request):
    page: PageSession = request.app.state.page
    errors: List[str] = []
    await _load(page, errors)
    return _render(request, page, errors)


@router.post("/", response_class=HTMLResponse)
async def ui_convert(
    request: Request,
    amount: str = Form(...),
    from_currency: str = Form(...),
    to_currency: str = Form(...),
):
    """Form submission: normalize amount, apply selections, convert, re-render.

    Errors leave the previous results on screen and add one message line.
    """
    page: PageSession = request.app.state.page
    errors: List[str] = []
    controller = await _load(page, errors)
    page.amount_field.value = amount
    if controller is None:
        return _render(request, page, errors)

    try:
        controller.format_amount_input()
        _select(page.from_menu, from_currency)
        _select(page.to_menu, to_currency)
        await controller.submit()
    except FxFormError as e:
        logger.info("conversion not rendered: %s", e)
        errors.append(str(e))
    return _render(request, page, errors)


@router.post("/swap", response_class=HTMLResponse)
async def ui_swap(
    request: Request,
    amount: Optional[str] = Form(None),
    from_currency: Optional[str] = Form(None),
    to_currency: Optional[str] = Form(None),
):
    """Swap the From/To selections. Results are not recomputed."""
    page: PageSession = request.app.state.page
    errors: List[str] = []
    controller = await _load(page, errors)
    if amount is not None:
        page.amount_field.value = amount
    if controller is not None:
        try:
            _select(page.from_menu, from_currency)
            _select(page.to_menu, to_currency)
        except FxFormError as e:
            errors.append(str(e))
        controller.swap()
    return _render(request, page, errors)
