from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from vacation import __version__
from vacation.api import routes_health
from vacation.api.rate_limit import limiter
from vacation.api.router import api_router
from vacation.clients import ClientRegistry
from vacation.config import Settings, get_settings
from vacation.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BusinessLogicError,
    ConfigurationError,
    DatabaseError,
    DataNotFoundError,
    ExternalAPIError,
    ServiceUnavailableError,
    VacationBaseException,
    ValidationError,
)
from vacation.lifecycle import lifespan
from vacation.utils.logging import get_logger

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    http_transport: Optional[httpx.BaseTransport] = None,
) -> FastAPI:
    """
    Instantiate the FastAPI application with routing, middleware and HTTP clients.

    Args:
        settings: defaults to get_settings()
        http_transport: when given, HTTP clients are enabled immediately over
            this transport instead of at startup
    """
    settings = settings or get_settings()
    application = FastAPI(
        title="ERP Vacation API",
        version=__version__,
        description="Leave requests, leave balances and approval workflow of the ERP vacation module.",
        lifespan=lifespan,
    )
    application.state.settings = settings

    if http_transport is not None:
        application.state.http_clients = ClientRegistry.enable(settings, transport=http_transport)

    # Rate limiting
    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-API-Key"],
    )

    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.api_prefix)
    application.include_router(routes_health.router, prefix="/health", tags=["health"])

    return application


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers mapping service exceptions onto HTTP status codes."""

    @app.exception_handler(DataNotFoundError)
    async def data_not_found_handler(request: Request, exc: DataNotFoundError) -> JSONResponse:
        logger.warning(f"Data not found: {exc.message}")
        return JSONResponse(status_code=404, content=exc.to_dict())

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        logger.warning(f"Validation error: {exc.message}")
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
        logger.warning(f"Authentication error: {exc.message}")
        return JSONResponse(status_code=401, content=exc.to_dict())

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
        logger.warning(f"Authorization error: {exc.message}")
        return JSONResponse(status_code=403, content=exc.to_dict())

    @app.exception_handler(BusinessLogicError)
    async def business_logic_error_handler(request: Request, exc: BusinessLogicError) -> JSONResponse:
        """Workflow rule violations (state transitions, balance, overlap) map to 422."""
        logger.warning(f"Business logic error: {exc.message}")
        return JSONResponse(status_code=422, content=exc.to_dict())

    @app.exception_handler(ExternalAPIError)
    async def external_api_error_handler(request: Request, exc: ExternalAPIError) -> JSONResponse:
        logger.error(f"External API error: {exc.message}")
        return JSONResponse(status_code=502, content=exc.to_dict())

    @app.exception_handler(ServiceUnavailableError)
    async def service_unavailable_handler(request: Request, exc: ServiceUnavailableError) -> JSONResponse:
        logger.error(f"Service unavailable: {exc.message}")
        return JSONResponse(status_code=503, content=exc.to_dict())

    @app.exception_handler(DatabaseError)
    async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
        logger.error(f"Database error: {exc.message}", exc_info=True)
        return JSONResponse(status_code=500, content=exc.to_dict())

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error(f"Configuration error: {exc.message}")
        return JSONResponse(status_code=500, content=exc.to_dict())

    @app.exception_handler(VacationBaseException)
    async def base_exception_handler(request: Request, exc: VacationBaseException) -> JSONResponse:
        """Catch-all for any custom exception without a dedicated handler."""
        logger.error(f"Unhandled service exception: {exc.message}", exc_info=True)
        return JSONResponse(status_code=500, content=exc.to_dict())


app = create_app()
