import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import api, health, ui
from .services.page import PageSession
from .services.rates import RateProvider, make_rate_provider


def create_app(
    settings_override: Settings | None = None,
    provider_override: Optional[RateProvider] = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment. Falls back to cached get_settings().
    provider_override: rate provider to use instead of the configured one
    (tests inject a provider backed by httpx.MockTransport).
    """
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(debug=settings.debug)
    if not settings.app_id and provider_override is None:
        logging.getLogger("fxform").warning(
            "APP_ID is not set; provider requests will fail"
        )

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )
    app.state.settings = settings
    app.state.page = PageSession(
        provider_override or make_rate_provider(settings), settings
    )

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(errors.FxFormError, errors.fxform_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(api.router)
    app.include_router(ui.router)

    return app


app = create_app()
