from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from urllib.parse import urlsplit
import logging
import traceback
from coach_api.core.config import settings
from coach_api.core.database import init_db
from coach_api.services.completion_service import get_completion_gateway
from coach_api.core.exceptions import (
    CoachException,
    ValidationError,
    NotFoundError,
    ConflictError,
    AuthenticationError,
    AuthorizationError
)

# Import models to register them with SQLModel
import coach_api.models  # noqa: F401

# Import API router
from coach_api.api.v1 import api_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

STATE_CHANGING_METHODS = ("POST", "PUT", "PATCH", "DELETE")

app = FastAPI(title="Coach API", version="1.0.0")


def _error_body(message: str, details=None) -> dict:
    body = {"error": message}
    if details is not None:
        body["details"] = details
    return body


# Request validation failures are client errors (400), not 422
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors with full details for debugging."""
    logger.warning(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
    details = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Invalid request", details),
    )


@app.exception_handler(CoachException)
async def coach_exception_handler(request: Request, exc: CoachException):
    """Handle custom application exceptions."""
    if isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ConflictError):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(exc, AuthenticationError):
        status_code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(exc, AuthorizationError):
        status_code = status.HTTP_403_FORBIDDEN
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if status_code >= 500:
        logger.error(f"Application error on {request.method} {request.url.path}: {type(exc).__name__}: {exc.message} ({exc.details})")
    else:
        logger.warning(f"Application exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=_error_body(exc.message, exc.details),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Keep framework errors (unknown route, wrong method) in the same body shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


# Add global exception handler for unhandled errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and answer with a generic 500."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)

    # In development, show full error details
    if settings.is_development:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                "Internal server error",
                f"{type(exc).__name__}: {str(exc)}\n{traceback.format_exc()}"
            ),
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error"),
    )


@app.middleware("http")
async def referer_origin_check(request: Request, call_next):
    """
    Reject cross-site state-changing API calls.

    Requests without a Referer (API clients) pass; a Referer whose host
    differs from the Host header, or that cannot be parsed, is refused.
    """
    if request.method in STATE_CHANGING_METHODS and request.url.path.startswith(settings.api_prefix + "/"):
        referer = request.headers.get("referer")
        if referer:
            expected_host = request.headers.get("host") or request.url.netloc
            try:
                referer_host = urlsplit(referer).netloc
            except ValueError:
                referer_host = ""
            if not referer_host:
                logger.warning(f"Blocked request with malformed referer: {referer}")
                return JSONResponse(
                    status_code=status.HTTP_403_FORBIDDEN,
                    content=_error_body("Invalid referer header"),
                )
            if referer_host != expected_host:
                logger.warning(
                    f"Blocked request with invalid referer {referer_host} "
                    f"(expected {expected_host}) on {request.url.path}"
                )
                return JSONResponse(
                    status_code=status.HTTP_403_FORBIDDEN,
                    content=_error_body("Invalid request origin"),
                )
    return await call_next(request)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Initialize database on startup."""
    init_db()


@app.on_event("shutdown")
async def shutdown_event():
    """Release the completion gateway's HTTP connections."""
    get_completion_gateway().close()


@app.get("/")
async def root():
    return {
        "message": "Coach API",
        "status": "running",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        }
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}


# Include API router
app.include_router(api_router, prefix=settings.api_prefix)
