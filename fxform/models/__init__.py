"""Pydantic and dataclass models for the currency conversion form."""

from .currency import (
    ConversionOut,
    ConversionRequest,
    ConversionView,
    CurrenciesPayload,
    CurrencyCatalog,
    RateTable,
)  # re-export
from .form import AmountField, ConversionDisplay, CurrencyMenu, CurrencyOption

__all__ = [
    "ConversionOut",
    "ConversionRequest",
    "ConversionView",
    "CurrenciesPayload",
    "CurrencyCatalog",
    "RateTable",
    "AmountField",
    "ConversionDisplay",
    "CurrencyMenu",
    "CurrencyOption",
]
