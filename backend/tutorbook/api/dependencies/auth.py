# backend/tutorbook/api/dependencies/auth.py
"""
Caller identity.

Authentication is owned by an upstream gateway, which forwards the
authenticated user's id in the X-User-Id header. These dependencies only
read and sanity-check that header.
"""

import logging
from typing import Optional

from fastapi import Header

from ...core.exceptions import UnauthorizedException
from ...errors import handle_domain_exception

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"


def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias=USER_ID_HEADER),
) -> str:
    """
    Return the caller's user id.

    Raises:
        HTTPException: 401 when the header is missing or blank
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        logger.info("Rejected request without caller identity")
        handle_domain_exception(
            UnauthorizedException("Authentication required", code="NOT_AUTHENTICATED")
        )
    return user_id
