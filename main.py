from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import httpx
from school_portal.core import config
from school_portal.core.config import get_settings, validate_settings
from school_portal.core.logging_config import setup_logging, get_logger
from school_portal.core.api_client import create_http_client
from school_portal.core.exceptions import (
    SchoolPortalException,
    ApiError,
    AuthenticationError,
    ConfigurationError,
    ConfirmationRequiredError,
    NotFoundError,
    alert_message,
    sanitize_error_message
)
from school_portal.core.security_middleware import SecurityHeadersMiddleware
from school_portal.api.v1.router import api_router
from school_portal.models.ui import Alert

# Setup logging first (before settings validation)
setup_logging()
logger = get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    try:
        logger.info("Validating configuration...")
        validate_settings()
        logger.info("Configuration validated successfully")

        current = config.settings
        logger.info(f"Starting {current.APP_NAME} v{current.APP_VERSION}")
        logger.info(f"Debug mode: {'ON' if current.DEBUG else 'OFF'}")
        logger.info(f"School API: {current.API_BASE_URL}")
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        logger.error("Application startup failed due to configuration issues.")
        raise

    # One connection pool shared by every request; credentials are added per request
    app.state.http_client = create_http_client()

    yield

    # Shutdown
    logger.info("Shutting down application")
    await app.state.http_client.aclose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Exam pages of the school management dashboard",
    lifespan=lifespan,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    openapi_url="/api/openapi.json" if settings.DEBUG else None,
)


def error_status(exc: SchoolPortalException) -> int:
    if isinstance(exc, AuthenticationError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, ApiError):
        # Client errors from the school API pass through; everything else is a bad gateway
        if exc.status_code is not None and 400 <= exc.status_code < 500:
            return exc.status_code
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConfirmationRequiredError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, ConfigurationError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


# Global exception handler for custom exceptions
@app.exception_handler(SchoolPortalException)
async def custom_exception_handler(request: Request, exc: SchoolPortalException):
    """Handle custom application exceptions."""
    logger.error(
        f"Application error: {exc.message}",
        extra={
            "error_code": exc.error_code,
            "path": str(request.url),
            "method": request.method,
        }
    )

    alert_type = "warning" if isinstance(exc, ConfirmationRequiredError) else "error"
    return JSONResponse(
        status_code=error_status(exc),
        content={
            "error": True,
            "message": exc.message,
            "error_code": exc.error_code,
            "details": exc.details if get_settings().DEBUG else None,
            "alert": Alert(type=alert_type, message=alert_message(exc)).model_dump(),
        }
    )


# Global exception handler for all other exceptions
@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all other exceptions."""
    logger.exception(
        f"Unhandled exception: {type(exc).__name__}",
        extra={
            "path": str(request.url),
            "method": request.method,
        }
    )

    sanitized_message = sanitize_error_message(exc)
    debug = get_settings().DEBUG

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "message": sanitized_message,
            "error_code": "INTERNAL_ERROR",
            "details": {
                "type": type(exc).__name__,
                "message": str(exc),
            } if debug else None,
            "alert": Alert(type="error", message=alert_message(exc)).model_dump(),
        }
    )


app.add_middleware(SecurityHeadersMiddleware)

allowed_origins = [
    settings.FRONTEND_URL,
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

# Remove duplicates while preserving order
seen = set()
allowed_origins = [x for x in allowed_origins if not (x in seen or seen.add(x))]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins if not settings.DEBUG else ["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
    }


@app.get("/health")
async def health_check(request: Request):
    """Health check including reachability of the school API."""
    health_status = {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }

    http_client = getattr(request.app.state, "http_client", None)
    if http_client is None:
        health_status["school_api"] = "not connected"
        health_status["status"] = "degraded"
    else:
        try:
            # Any HTTP answer means the school API is reachable
            await http_client.get("/")
            health_status["school_api"] = "reachable"
        except httpx.HTTPError as e:
            logger.error(f"School API health check failed: {str(e)}")
            health_status["school_api"] = "unreachable"
            health_status["status"] = "degraded"

    status_code = status.HTTP_200_OK if health_status["status"] == "healthy" else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(content=health_status, status_code=status_code)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=settings.DEBUG)
