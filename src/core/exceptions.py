import traceback
import uuid
from typing import Dict, Optional
from contextvars import ContextVar
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.config_log import logger


request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

PROBLEM_MEDIA_TYPE = "application/problem+json"
PROBLEM_TITLES = {
    500: "An error occurred while processing your request.",
    503: "Service Unavailable",
}


class WeatherApiException(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        headers: Optional[Dict[str, str]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.headers = headers
        super().__init__(self.message)


class ValidationError(WeatherApiException):
    """Caller supplied input outside the accepted range."""
    def __init__(self, message: str):
        super().__init__(message=message, status_code=400)


class ConfigurationError(WeatherApiException):
    """Operator-side misconfiguration, e.g. a missing API key."""
    def __init__(self, message: str):
        super().__init__(message=message, status_code=400)


class ServiceUnavailableError(WeatherApiException):
    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(message=message, status_code=503)


class ProviderUnavailableError(ServiceUnavailableError):
    """The weather provider could not be reached at the transport level."""
    def __init__(self, message: str = "Unable to fetch weather data from external service"):
        super().__init__(message=message)


class InternalServerError(WeatherApiException):
    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message=message, status_code=500)


def create_error_response(status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    """Builds the `{"error": message}` body the front-end expects."""
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def create_problem_response(detail: str, status_code: int = 500) -> JSONResponse:
    """Builds a problem-details body for server-side failures."""
    return JSONResponse(
        status_code=status_code,
        media_type=PROBLEM_MEDIA_TYPE,
        content={
            "type": "about:blank",
            "title": PROBLEM_TITLES.get(status_code, "Error"),
            "status": status_code,
            "detail": detail,
            "request_id": request_id_ctx.get(),
        },
    )


async def weather_api_exception_handler(request: Request, exc: WeatherApiException) -> JSONResponse:
    """Handler for every exception derived from WeatherApiException."""

    logger.warning(f"API Error: {exc.message} | Path: {request.url.path}")
    if exc.status_code >= 500 and not isinstance(exc, ServiceUnavailableError):
        return create_problem_response(exc.message, exc.status_code)
    return create_error_response(exc.status_code, exc.message, exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Missing or unparsable query parameters are a 400, as with range errors."""

    messages = []
    for error in exc.errors():
        field = ".".join(str(x) for x in error.get("loc", []) if x not in ("query", "body", "path"))
        messages.append(f"{field}: {error.get('msg', 'invalid value')}" if field else error.get("msg", "invalid value"))

    logger.info(f"Validation Error: {messages} | Path: {request.url.path}")
    return create_error_response(400, "; ".join(messages) or "Invalid request")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handler for plain Starlette HTTP exceptions (404, 405, ...)."""

    messages = {404: "Resource not found", 405: "Method not allowed"}
    msg = messages.get(exc.status_code, str(exc.detail))
    return create_error_response(exc.status_code, msg, getattr(exc, "headers", None))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for anything unanticipated. Details go to the log only."""

    logger.error(f"Unhandled Exception: {type(exc).__name__}: {str(exc)} | Traceback: {traceback.format_exc()}")
    return create_problem_response("An unexpected error occurred")


async def request_id_middleware(request: Request, call_next):
    """Generates a request id, exposes it to the context and the response headers."""

    req_id = str(uuid.uuid4())
    token = request_id_ctx.set(req_id)
    try:
        response = await call_next(request)
    finally:
        request_id_ctx.reset(token)
    response.headers["X-Request-ID"] = req_id
    return response


def setup_exception_handlers(app: FastAPI):
    """Registers the exception handlers and the request-id middleware."""

    app.middleware("http")(request_id_middleware)
    app.add_exception_handler(WeatherApiException, weather_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
