"""
Common API utilities for turning repository results into HTTP responses.
"""
import logging

from fastapi import HTTPException, status

from .result import ErrorKind, Result

logger = logging.getLogger(__name__)


STATUS_BY_ERROR_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.STORAGE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.RENDER: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_status_code(kind: ErrorKind) -> int:
    return STATUS_BY_ERROR_KIND.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def unwrap_or_raise(result: Result):
    """
    Return the value of an Ok result or raise the matching HTTPException.

    Args:
        result: Result returned by a repository or export function

    Returns:
        The wrapped success value

    Raises:
        HTTPException: 404 for not found, 409 for conflicts, 500 otherwise
    """
    if result.is_ok():
        return result.value

    status_code = error_status_code(result.kind)
    if status_code >= 500:
        logger.error("Request failed (%s): %s", result.kind.value, result.error)
    raise HTTPException(status_code=status_code, detail=result.error)
