# backend/tutorbook/routes/v1/health.py
"""
Health check endpoint for monitoring and load balancer probes.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...api.dependencies.database import get_db
from ...core.config import settings
from ...core.constants import API_VERSION, BRAND_NAME
from ...schemas.main_responses import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Health check endpoint.

    Returns service info and whether the database answers a trivial query.
    """
    database = "ok"
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning(f"Health check database probe failed: {exc}")
        database = "error"

    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        service=f"{BRAND_NAME.lower()}-api",
        version=API_VERSION,
        environment=settings.environment,
        database=database,
    )
