from __future__ import annotations

"""Conversion form controller.

Per submission the controller moves through
IDLE -> RATES_REQUESTED -> RATES_RECEIVED -> RESULTS_RENDERED -> IDLE.
A provider error ends the submission in FAILED. A submission overtaken by a
newer one is discarded once its rates arrive. Neither touches the display.
"""
import enum
import itertools
import logging
from typing import Mapping, Optional

from fxform.core.errors import FxFormError
from fxform.models.currency import ConversionRequest, ConversionView, CurrencyCatalog
from fxform.models.form import AmountField, ConversionDisplay, CurrencyMenu
from .converter import convert, format_amount
from .rates import RateProvider

logger = logging.getLogger("fxform.form")


class SubmissionState(str, enum.Enum):
    IDLE = "idle"
    RATES_REQUESTED = "rates_requested"
    RATES_RECEIVED = "rates_received"
    RESULTS_RENDERED = "results_rendered"
    FAILED = "failed"


def compute_view(
    token: int,
    req: ConversionRequest,
    rates: Mapping[str, float],
    catalog: CurrencyCatalog,
    *,
    amount_decimals: int = 2,
    unit_decimals: int = 6,
) -> ConversionView:
    """Run the three conversions for a request and build the display lines."""
    src, dst = req.from_currency, req.to_currency
    amount = format_amount(req.amount, amount_decimals)
    full = convert(req.amount, rates, src, dst, amount_decimals)
    forward = convert(1, rates, src, dst, unit_decimals)
    backward = convert(1, rates, dst, src, unit_decimals)
    return ConversionView(
        token=token,
        from_currency=src,
        to_currency=dst,
        amount=amount,
        full_result=full,
        unit_forward=forward,
        unit_backward=backward,
        specific_from=f"{amount} {catalog.display_name(src)} =",
        specific_to=f"{full} {catalog.display_name(dst)}",
        unit_from=f"1 {src} = {forward} {dst}",
        unit_to=f"1 {dst} = {backward} {src}",
    )


class ConversionFormController:
    def __init__(
        self,
        provider: RateProvider,
        catalog: CurrencyCatalog,
        from_menu: CurrencyMenu,
        to_menu: CurrencyMenu,
        amount_field: AmountField,
        display: ConversionDisplay,
        *,
        amount_decimals: int = 2,
        unit_decimals: int = 6,
    ):
        self.provider = provider
        self.catalog = catalog
        self.from_menu = from_menu
        self.to_menu = to_menu
        self.amount_field = amount_field
        self.display = display
        self.amount_decimals = amount_decimals
        self.unit_decimals = unit_decimals
        self.state = SubmissionState.IDLE
        self.last_view: Optional[ConversionView] = None
        self._tokens = itertools.count(1)
        self._latest_token = 0

    # Form state ------------------------------------------------
    def read_request(self) -> ConversionRequest:
        from_code = self.from_menu.value
        to_code = self.to_menu.value
        if from_code is None or to_code is None:
            raise FxFormError("currency menus are empty; catalog not loaded")
        amount = format_amount(self.amount_field.value, self.amount_decimals)
        return ConversionRequest(
            amount=amount, from_currency=from_code, to_currency=to_code
        )

    def format_amount_input(self) -> str:
        """Rewrite the amount field to a fixed number of decimals."""
        self.amount_field.value = format_amount(
            self.amount_field.value, self.amount_decimals
        )
        return self.amount_field.value

    def swap(self) -> None:
        """Exchange the selections of the two menus."""
        from_code = self.from_menu.value
        to_code = self.to_menu.value
        if from_code is None or to_code is None:
            return
        self.from_menu.select(self.from_menu.menu_id + to_code)
        self.to_menu.select(self.to_menu.menu_id + from_code)

    # Submission ------------------------------------------------
    async def submit(
        self, request: Optional[ConversionRequest] = None
    ) -> Optional[ConversionView]:
        """Fetch fresh rates and render the conversion into the display.

        Returns None when a newer submission started before this one's rates
        arrived. Provider and conversion errors propagate.
        """
        req = request or self.read_request()
        token = next(self._tokens)
        self._latest_token = token
        extra = {"submission_token": token}

        self.state = SubmissionState.RATES_REQUESTED
        logger.debug(
            "rates requested %s->%s", req.from_currency, req.to_currency, extra=extra
        )
        try:
            table = await self.provider.fetch_latest()
        except FxFormError:
            if token == self._latest_token:
                self.state = SubmissionState.FAILED
            raise

        if token != self._latest_token:
            logger.info("discarding superseded submission", extra=extra)
            return None
        self.state = SubmissionState.RATES_RECEIVED

        try:
            view = compute_view(
                token,
                req,
                table.rates,
                self.catalog,
                amount_decimals=self.amount_decimals,
                unit_decimals=self.unit_decimals,
            )
        except FxFormError:
            self.state = SubmissionState.FAILED
            raise
        self._render(view)
        self.state = SubmissionState.RESULTS_RENDERED
        logger.debug("results rendered", extra=extra)
        self.last_view = view
        self.state = SubmissionState.IDLE
        return view

    def _render(self, view: ConversionView) -> None:
        self.display.specific_from = view.specific_from
        self.display.specific_to = view.specific_to
        self.display.unit_from = view.unit_from
        self.display.unit_to = view.unit_to
