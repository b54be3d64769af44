"""
Owner identification for API requests.

Authentication happens upstream; the authenticating proxy forwards the
verified user id in a header and this module only reads it.
"""
import logging

from fastapi import HTTPException, Request, status

from ..config.settings import get_settings

logger = logging.getLogger(__name__)


def get_current_owner_id(request: Request) -> str:
    header = get_settings().owner_id_header
    owner_id = request.headers.get(header, "").strip()
    if not owner_id:
        logger.warning("Request to %s without %s header", request.url.path, header)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing owner identity",
        )
    return owner_id
