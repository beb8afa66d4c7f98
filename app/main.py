import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.core.exceptions import (
    TasteValidationError,
    SignalConflictError,
    PermissionDeniedError,
)
from app.core.security import init_firebase
from app.api.v1.router import api_router
from app.db.session import init_db

settings = get_settings()

# Configure logging - suppress noisy third-party loggers
logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

# Silence noisy third-party libraries
logging.getLogger("urllib3").setLevel(logging.WARNING)
logging.getLogger("cachecontrol").setLevel(logging.WARNING)
logging.getLogger("google").setLevel(logging.WARNING)
logging.getLogger("firebase_admin").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting BrewMate Backend...")
    init_firebase(settings)
    await init_db()
    yield
    # Shutdown
    logger.info("Shutting down BrewMate Backend...")


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="""
## BrewMate API

Backend for the BrewMate coffee companion app.

### Features
- **User signals**: Scans, favorites, ignores, consumption and feedback aggregated per coffee
- **Taste profile**: Sweetness, acidity, bitterness and body normalized to a 0-10 scale

### Authentication
All endpoints require Firebase Authentication. Include the ID token in the Authorization header:
```
Authorization: Bearer <firebase_id_token>
```
""",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "signals", "description": "Per-coffee interaction signals"},
        {"name": "profile", "description": "Taste profile management"},
        {"name": "health", "description": "Health checks"},
    ],
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(TasteValidationError)
async def taste_validation_exception_handler(
    request: Request, exc: TasteValidationError
):
    return JSONResponse(
        status_code=400,
        content={
            "error": "validation_error",
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.exception_handler(SignalConflictError)
async def signal_conflict_exception_handler(
    request: Request, exc: SignalConflictError
):
    logger.warning(f"SignalConflictError: {exc.message} (details={exc.details})")
    return JSONResponse(
        status_code=409,
        content={
            "error": "conflict",
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.exception_handler(PermissionDeniedError)
async def permission_denied_exception_handler(
    request: Request, exc: PermissionDeniedError
):
    return JSONResponse(
        status_code=403,
        content={
            "error": "permission_denied",
            "message": exc.message,
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle FastAPI HTTPExceptions with consistent format."""
    error_type = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        409: "conflict",
        422: "validation_error",
    }.get(exc.status_code, "http_error")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": error_type,
            "message": exc.detail if isinstance(exc.detail, str) else str(exc.detail),
        },
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error occurred")
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
        },
    )


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


# Root health check
@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": settings.APP_NAME}
