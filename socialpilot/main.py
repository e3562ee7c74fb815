"""
SocialPilot API - FastAPI application entry point.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from . import models  # noqa: F401  registers tables on Base.metadata
from .config import get_settings
from .database import engine, Base, SessionLocal
from .errors import SocialPilotError
from .limiter import limiter
from .logging_config import api_logger
from .middleware import SecurityHeadersMiddleware, RequestLoggingMiddleware
from .responses import domain_error_handler
from .routes import (
    auth_router,
    users_router,
    posts_router,
    images_router,
    trends_router,
)
from .services import get_post_scheduler

settings = get_settings()

# Create tables (in production, use Alembic migrations instead)
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start auto-posting timers on startup and stop them on shutdown."""
    scheduler = None
    if settings.scheduler_enabled:
        scheduler = get_post_scheduler()
        scheduler.run()
        with SessionLocal() as db:
            count = scheduler.start_all_schedulers(db)
        api_logger.info("Auto-posting schedulers started", count=count)

    yield

    if scheduler is not None and scheduler.running:
        scheduler.shutdown()
        api_logger.info("Auto-posting schedulers stopped")


app = FastAPI(
    title="SocialPilot API",
    description="AI social post drafting and multi-platform publishing",
    version="1.0.0",
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(SocialPilotError, domain_error_handler)

# Security headers middleware
app.add_middleware(SecurityHeadersMiddleware)

# Request logging middleware (only in debug mode)
if settings.debug:
    app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    max_age=3600,
)

# Routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(posts_router)
app.include_router(images_router)
app.include_router(trends_router)


@app.get("/api/health")
def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "version": "1.0.0",
    }


@app.get("/")
def root():
    return {
        "message": "SocialPilot API",
        "docs": "/api/docs" if settings.debug else "Disabled in production",
    }
