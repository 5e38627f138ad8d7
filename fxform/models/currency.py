from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Annotated, Dict, Iterator, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

# Positive and finite; json parses 1e400 and Infinity to inf
Rate = Annotated[float, Field(gt=0, allow_inf_nan=False)]


def _normalize_code(v: str) -> str:
    v = v.strip().upper()
    if not v:
        raise ValueError("currency code cannot be empty")
    return v


class CurrenciesPayload(RootModel[Dict[str, str]]):
    """Shape of ``currencies.json``: code -> display name."""

    @field_validator("root")
    @classmethod
    def codes_not_blank(cls, v: Dict[str, str]) -> Dict[str, str]:
        for code in v:
            if not code.strip():
                raise ValueError("currency code cannot be empty")
        return v


class RateTable(BaseModel):
    """Shape of ``latest.json``; extra provider fields (license, disclaimer) are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    base: str = "USD"
    timestamp: Optional[int] = None
    rates: Dict[str, Rate]


class CurrencyCatalog(Mapping[str, str]):
    """Read-only snapshot of the provider catalog, in provider order."""

    def __init__(self, entries: Mapping[str, str]):
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, code: str) -> str:
        return self._entries[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CurrencyCatalog({len(self)} currencies)"

    def display_name(self, code: str) -> str:
        """Long name for a code; rate-table-only codes fall back to the code."""
        return self._entries.get(code, code)


class ConversionRequest(BaseModel):
    amount: Decimal
    from_currency: str
    to_currency: str

    @field_validator("from_currency", "to_currency")
    @classmethod
    def upper_code(cls, v: str) -> str:
        return _normalize_code(v)


@dataclass(frozen=True)
class ConversionView:
    token: int
    from_currency: str
    to_currency: str
    amount: str
    full_result: str
    unit_forward: str
    unit_backward: str
    specific_from: str
    specific_to: str
    unit_from: str
    unit_to: str


class ConversionOut(BaseModel):
    amount: str
    from_currency: str
    to_currency: str
    from_name: str
    to_name: str
    result: str
    unit_forward: str
    unit_backward: str
    base: str
    timestamp: Optional[int] = None
    lines: Dict[str, str] = Field(default_factory=dict)
