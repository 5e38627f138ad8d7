from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

logger = logging.getLogger("fxform.errors")


class FxFormError(Exception):
    """Base for every failure outcome the converter can report."""

    code = "fxform_error"


class ProviderUnavailableError(FxFormError):
    """Network failure or non-success status from the rate provider."""

    code = "provider_unavailable"


class ProviderSchemaError(FxFormError):
    """Provider answered, but the payload does not have the expected shape."""

    code = "provider_schema"


class InvalidRateError(ProviderSchemaError):
    """Rate in the table is not a positive finite number."""

    code = "invalid_rate"

    def __init__(self, currency: str, rate: object):
        super().__init__(currency, rate)
        self.currency = currency
        self.rate = rate

    def __str__(self) -> str:
        return f"rate {self.rate!r} for {self.currency!r} is not a positive number"


class UnknownCurrencyError(FxFormError, KeyError):
    code = "unknown_currency"

    def __init__(self, currency: str):
        super().__init__(currency)
        self.currency = currency

    def __str__(self) -> str:
        return f"unknown currency {self.currency!r}"


class InvalidAmountError(FxFormError, ValueError):
    code = "invalid_amount"

    def __init__(self, value: object):
        super().__init__(value)
        self.value = value

    def __str__(self) -> str:
        return f"amount {self.value!r} is not a number"


def http_error_handler(request: Request, exc):  # type: ignore
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "not_found" if exc.status_code == 404 else "http_error",
            "detail": exc.detail
            if exc.status_code != 404
            else f"No route for {request.method} {request.url.path}",
        },
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": exc.errors(),
        },
    )


def fxform_error_handler(request: Request, exc: FxFormError):  # type: ignore
    if isinstance(exc, (ProviderUnavailableError, ProviderSchemaError)):
        status_code = status.HTTP_502_BAD_GATEWAY
        logger.warning("provider failure: %s", exc)
    else:
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "detail": str(exc)},
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
