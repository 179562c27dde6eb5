"""
Hostel Meals FastAPI Application
Main entry point: wiring of configuration, clients, middleware and routes
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio

from api.routes import (
    health,
    users,
    meals,
    upcoming_meals,
    meal_requests,
    reviews,
    payments,
    dashboard,
)

from adapters.mongo_adapter import MongoStore
from adapters.payment_adapter import StripeGateway
from adapters.identity_adapter import FirebaseTokenVerifier

from app.config import settings

from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    app_exception_handler,
    general_exception_handler,
)
from app.exceptions import AppError

# Setup logging with configured level and format
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("hostelmeals.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup and shutdown.
    Connects the store with retries and builds the payment and token clients.
    """
    _logger.info(f"Starting {settings.app_name} in {settings.environment.value} mode")

    store = MongoStore(
        settings.mongo_uri,
        settings.mongo_db_name,
        settings.mongo_server_selection_timeout_ms,
    )
    for attempt in range(1, settings.db_init_attempts + 1):
        try:
            # pymongo is blocking; keep the event loop free
            await anyio.to_thread.run_sync(store.connect)
            _logger.info("Database initialization succeeded")
            break
        except Exception as exc:
            _logger.warning(
                "Database init attempt %d/%d failed: %s",
                attempt,
                settings.db_init_attempts,
                exc,
            )
            if attempt < settings.db_init_attempts:
                await anyio.sleep(settings.db_init_delay_sec)
            else:
                _logger.error(
                    "Database initialization failed after %d attempts", attempt
                )
                raise

    app.state.store = store
    app.state.payment_gateway = StripeGateway(
        settings.stripe_secret_key,
        api_base=settings.stripe_api_base,
        currency=settings.payment_currency,
        timeout=settings.payment_timeout_sec,
    )
    app.state.token_verifier = FirebaseTokenVerifier(
        settings.firebase_project_id,
        settings.firebase_jwks_url,
        timeout=settings.auth_timeout_sec,
        refresh_interval=settings.auth_keys_refresh_sec,
    )
    if not settings.stripe_secret_key:
        _logger.warning("Stripe secret key not configured; payment intents will fail")
    if not settings.firebase_project_id:
        _logger.warning("Firebase project id not configured; token checks will fail")

    try:
        yield
    finally:
        _logger.info(f"Shutting down {settings.app_name}")
        for name in ("payment_gateway", "token_verifier", "store"):
            try:
                getattr(app.state, name).close()
            except Exception as e:
                _logger.exception("Error closing %s during shutdown: %s", name, e)


app = FastAPI(
    title=settings.api_title,
    version=settings.app_version,
    description=settings.api_description,
    lifespan=lifespan,
    debug=settings.debug,
    openapi_url=(
        f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
    ),
    docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
    redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production() else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(AppError, app_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

for module in (
    health,
    users,
    meals,
    upcoming_meals,
    meal_requests,
    reviews,
    payments,
    dashboard,
):
    app.include_router(module.router, prefix=settings.api_prefix)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
