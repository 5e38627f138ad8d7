"""Currency conversion form backed by the Open Exchange Rates API."""

__version__ = "0.1.0"
