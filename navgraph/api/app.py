"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, and route registration.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from navgraph import __version__
from navgraph.api.dependencies import get_settings
from navgraph.api.exceptions import NavGraphAPIError, from_domain_error
from navgraph.api.middleware import RequestContextMiddleware
from navgraph.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from navgraph.api.routes import register_routes
from navgraph.exceptions import NavGraphError
from navgraph.observability.logging import get_logger, setup_logging
from navgraph.observability.metrics import ERRORS

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Sets up logging from settings, CORS, the request context
    middleware, global exception handlers, and all routes.
    """
    settings = get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
        extra_sensitive_keys=log_config.extra_sensitive_keys,
    )

    app = FastAPI(
        title="NavGraph API",
        description="Directed navigation graphs with AI-assisted step selection",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)
    register_routes(app)

    logger.info(
        "app_created",
        debug=settings.debug,
        cors_origins=settings.api.cors_origins,
    )
    return app


def _error_response(exc: NavGraphAPIError) -> JSONResponse:
    response = ErrorResponse(
        error=ErrorBody(code=exc.error_code, message=exc.message, details=exc.details)
    )
    return JSONResponse(status_code=exc.status_code, content=response.model_dump(mode="json"))


def _validation_details(exc: RequestValidationError | ValidationError) -> list[ErrorDetail]:
    return [
        ErrorDetail(field=".".join(str(loc) for loc in error["loc"]), message=error["msg"])
        for error in exc.errors()
    ]


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(NavGraphAPIError)
    async def api_error_handler(request: Request, exc: NavGraphAPIError) -> JSONResponse:
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        return _error_response(exc)

    @app.exception_handler(NavGraphError)
    async def domain_error_handler(request: Request, exc: NavGraphError) -> JSONResponse:
        """Translate domain errors raised by the navigation service."""
        ERRORS.labels(error_type=type(exc).__name__).inc()
        api_error = from_domain_error(exc)
        logger.warning(
            "domain_error",
            error_type=type(exc).__name__,
            error_code=api_error.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        return _error_response(api_error)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors."""
        logger.warning("validation_error", errors=exc.errors(), path=request.url.path)
        response = ErrorResponse(
            error=ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Request validation failed",
                details=_validation_details(exc),
            )
        )
        return JSONResponse(status_code=400, content=response.model_dump(mode="json"))

    @app.exception_handler(ValidationError)
    async def pydantic_validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors raised outside request parsing."""
        logger.warning("pydantic_validation_error", errors=exc.errors(), path=request.url.path)
        response = ErrorResponse(
            error=ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Data validation failed",
                details=_validation_details(exc),
            )
        )
        return JSONResponse(status_code=400, content=response.model_dump(mode="json"))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        ERRORS.labels(error_type=type(exc).__name__).inc()
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        response = ErrorResponse(
            error=ErrorBody(code=ErrorCode.INTERNAL_ERROR, message="An unexpected error occurred")
        )
        return JSONResponse(status_code=500, content=response.model_dump(mode="json"))
