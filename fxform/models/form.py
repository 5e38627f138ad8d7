"""Page elements the loader and controller write into.

These stand in for the host document: two option menus, the amount input and
four output regions. They are plain mutable objects owned by the page session
and handed to the services explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class CurrencyOption:
    option_id: str
    value: str
    label: str
    selected: bool = False


@dataclass
class CurrencyMenu:
    menu_id: str
    options: List[CurrencyOption] = field(default_factory=list)

    def append(self, option: CurrencyOption) -> None:
        # First option is selected by default, as a browser <select> would do
        if not self.options:
            option.selected = True
        self.options.append(option)

    def get(self, option_id: str) -> Optional[CurrencyOption]:
        return next((o for o in self.options if o.option_id == option_id), None)

    def select(self, option_id: str) -> None:
        target = self.get(option_id)
        if target is None:
            raise KeyError(option_id)
        for opt in self.options:
            opt.selected = opt is target

    def select_value(self, value: str) -> None:
        self.select(self.menu_id + value)

    @property
    def value(self) -> Optional[str]:
        for opt in self.options:
            if opt.selected:
                return opt.value
        return None


@dataclass
class AmountField:
    value: str = "1.00"


@dataclass
class ConversionDisplay:
    specific_from: str = ""
    specific_to: str = ""
    unit_from: str = ""
    unit_to: str = ""

    def as_dict(self) -> Dict[str, str]:
        return {
            "specific_from": self.specific_from,
            "specific_to": self.specific_to,
            "unit_from": self.unit_from,
            "unit_to": self.unit_to,
        }
