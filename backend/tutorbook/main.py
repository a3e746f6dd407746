# backend/tutorbook/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.routing import APIRoute

from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME, HEALTH_PATH
from .core.request_context import attach_request_id_filter
from .database import engine
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .middleware.request_id import RequestIdMiddlewareASGI
from .middleware.timing_asgi import TimingMiddlewareASGI
from .routes import prometheus
from .routes.v1 import (
    bookings as bookings_v1,
    health as health_v1,
    sessions as sessions_v1,
    subjects as subjects_v1,
    tutors as tutors_v1,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
)
attach_request_id_filter()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Database dialect: {engine.dialect.name}")
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")
    if not settings.redis_url:
        logger.info("REDIS_URL not set; booking locks are process-local")

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")
    engine.dispose()


def _unique_operation_id(route: APIRoute) -> str:
    methods = "_".join(sorted(m.lower() for m in route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").strip("_")
    name = (route.name or "operation").lower().replace(" ", "_")
    return f"{methods}__{path}__{name}".strip("_")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
    generate_unique_id_function=_unique_operation_id,
)

# Register unified problem+json error handlers
register_error_handlers(app)

# Outermost last: request id wraps timing and metrics
app.add_middleware(PrometheusMiddleware)
app.add_middleware(TimingMiddlewareASGI)
app.add_middleware(RequestIdMiddlewareASGI)

api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(tutors_v1.router, prefix="/tutors")
api_v1.include_router(bookings_v1.router, prefix="/bookings")
api_v1.include_router(sessions_v1.router, prefix="/sessions")
api_v1.include_router(subjects_v1.router, prefix="/subjects")
api_v1.include_router(health_v1.router, prefix="/health")

app.include_router(api_v1)

# Probe and scrape paths stay unversioned
app.include_router(health_v1.router, prefix=HEALTH_PATH, include_in_schema=False)
app.include_router(prometheus.router)
