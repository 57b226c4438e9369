from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import HTTPException as FastAPIHTTPException, RequestValidationError

from app.cache.cache_service import redis_cache
from app.core.logger import setup_logging
from app.middleware.cors import configure_cors
from app.middleware.logging import RequestLoggerMiddleware
from app.middleware import error_handler

# Routers
from app.routers import auth as auth_router
from app.routers import sessions as sessions_router
from app.routers import settings as settings_router
from app.routers import subscription as subscription_router
from app.routers import webhooks as webhooks_router
from app.routers import users as users_router
from app.routers import pricing as pricing_router
from app.routers import timezones as timezones_router
from app.routers import world_clock as world_clock_router
from app.routers import jwt_snippets as jwt_snippets_router
from app.routers import support as support_router
from app.routers import admin as admin_router
from app.routers import health as health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release the shared Redis client on shutdown."""
    yield
    await redis_cache.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    setup_logging()
    description = (
        "DevToolsHub API.\n\n"
        "Account settings, session tracking, subscriptions and saved tool data for the developer tools hub."
    )

    openapi_tags = [
        {"name": "authentication", "description": "OAuth code exchange and sign-out."},
        {"name": "sessions", "description": "Active browser sessions and login alerts."},
        {"name": "settings", "description": "Profile, preferences, notifications, data export and account deletion."},
        {"name": "subscription", "description": "Premium plan checkout, billing portal and reconciliation."},
        {"name": "webhooks", "description": "Stripe webhook receiver."},
        {"name": "users", "description": "Current user profile, plan and admin status."},
        {"name": "pricing", "description": "Public pricing information."},
        {"name": "timezones", "description": "Saved timezones for the comparison tool."},
        {"name": "world-clock", "description": "Saved World Clock cities."},
        {"name": "jwt-snippets", "description": "Tokens saved from the JWT decoder."},
        {"name": "support", "description": "Contact form."},
        {"name": "admin", "description": "Administrative subscription inspection and repair."},
        {"name": "health", "description": "Health checks and service status endpoints."},
    ]

    app = FastAPI(
        title="DevToolsHub API",
        version="0.1.0",
        description=description,
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    # Middleware
    configure_cors(app)
    app.add_middleware(RequestLoggerMiddleware)

    # Exception handlers
    app.add_exception_handler(FastAPIHTTPException, error_handler.http_exception_handler)
    app.add_exception_handler(RequestValidationError, error_handler.validation_exception_handler)

    # Include routers
    app.include_router(health_router.router)
    app.include_router(auth_router.router)
    app.include_router(sessions_router.router)
    app.include_router(settings_router.router)
    app.include_router(subscription_router.router)
    app.include_router(webhooks_router.router)
    app.include_router(users_router.router)
    app.include_router(pricing_router.router)
    app.include_router(timezones_router.router)
    app.include_router(world_clock_router.router)
    app.include_router(jwt_snippets_router.router)
    app.include_router(support_router.router)
    app.include_router(admin_router.router)

    return app


app = create_app()
