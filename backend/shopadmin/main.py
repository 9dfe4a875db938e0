"""
Storefront Admin Settings API

FastAPI application that provides:
- SMTP mail settings
- Facebook Pixel settings and test events
- Google Analytics settings and test events
- Public tracking ids and server-side event forwarding

Settings are persisted to the env file, not a database.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from . import __version__
from .common.logging_setup import get_service_logger
from .middleware.audit import AuditLoggingMiddleware
from .routers import facebook_pixel, google_analytics, mail, tracking
from .services.settings import get_env_file_path, get_settings

logger = get_service_logger("api")


# ============================================
# ENVIRONMENT CONFIGURATION
# ============================================

settings = get_settings()

ALLOWED_ORIGINS = settings.cors_origins

# Default origins for development
if settings.environment == "development" or not ALLOWED_ORIGINS:
    ALLOWED_ORIGINS.extend([
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ])


# ============================================
# APPLICATION LIFESPAN
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application startup and shutdown events.
    """
    logger.info(
        "Starting Storefront Admin API",
        extra={
            "environment": settings.environment,
            "env_file": get_env_file_path(),
            "allowed_origins": ALLOWED_ORIGINS,
        },
    )

    yield

    logger.info("Shutting down API")


# ============================================
# CREATE APPLICATION
# ============================================

app = FastAPI(
    title="Storefront Admin Settings API",
    description="""
    Back-office API for the storefront's runtime settings.

    ## Features
    - **Mail**: SMTP settings and test emails
    - **Facebook Pixel**: Conversions API settings and test events
    - **Google Analytics**: Measurement Protocol settings and test events
    - **Tracking**: Public tracking ids and server-side event forwarding
    """,
    version=__version__,
    lifespan=lifespan,
)


# ============================================
# MIDDLEWARE
# ============================================

app.add_middleware(AuditLoggingMiddleware)

# Holds the GA client id between requests
app.add_middleware(SessionMiddleware, secret_key=settings.session_secret)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================
# INCLUDE ROUTERS
# ============================================

app.include_router(
    mail.router,
    prefix="/api/settings/mail",
    tags=["Mail Settings"]
)

app.include_router(
    facebook_pixel.router,
    prefix="/api/settings/facebook-pixel",
    tags=["Facebook Pixel"]
)

app.include_router(
    google_analytics.router,
    prefix="/api/settings/google-analytics",
    tags=["Google Analytics"]
)

app.include_router(
    tracking.router,
    prefix="/api/tracking",
    tags=["Tracking"]
)


# ============================================
# ROOT ENDPOINT
# ============================================

@app.get("/", tags=["Health"])
async def root():
    """
    Health check endpoint.

    Returns basic API information.
    """
    return {
        "name": "Storefront Admin Settings API",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Detailed health check.

    Checks that the env file is readable.
    """
    env_file = get_env_file_path()
    try:
        with open(env_file, "r", encoding="utf-8"):
            env_status = "readable"
    except OSError:
        env_status = "unavailable"

    return {
        "status": "healthy" if env_status == "readable" else "degraded",
        "env_file": env_status,
        "version": __version__
    }
