"""
Tagged success/failure values returned by the repository and export layers.

Repository functions never raise to their callers. Each returns either
``Ok(value)`` or ``Err(error, kind)`` and the call site decides what to do
with both outcomes.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from sqlalchemy.exc import SQLAlchemyError, StatementError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    STORAGE = "storage"
    RENDER = "render"
    UNKNOWN = "unknown"


class ResultError(Exception):
    """Raised when unwrapping an Err."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: str
    kind: ErrorKind = ErrorKind.STORAGE

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise ResultError(self.error)


Result = Union[Ok[T], Err]


def not_found(resource_type: str) -> Err:
    """Failure for a row that is absent or owned by someone else."""
    return Err(f"{resource_type} not found", ErrorKind.NOT_FOUND)


def conflict(resource_type: str) -> Err:
    return Err(f"{resource_type} already exists", ErrorKind.CONFLICT)


def _describe_storage_error(error: SQLAlchemyError) -> str:
    # Statement errors render the SQL and bound parameters; keep only the driver's message
    if isinstance(error, StatementError) and error.orig is not None:
        return str(error.orig).strip() or type(error.orig).__name__
    return str(error).strip() or type(error).__name__


def storage_failure(intent: str, error: Exception) -> Err:
    """
    Convert an exception caught around a storage call into a failure value.

    Args:
        intent: What the operation was trying to do, e.g.
            "Failed to read from the applications table"
        error: The caught exception

    Returns:
        Err tagged STORAGE for SQLAlchemy errors, UNKNOWN for anything else
    """
    if isinstance(error, SQLAlchemyError):
        logger.error("%s: %s", intent, error)
        return Err(f"{intent}: {_describe_storage_error(error)}", ErrorKind.STORAGE)

    logger.exception("%s: unexpected %s", intent, type(error).__name__)
    return Err(f"{intent}: unknown error", ErrorKind.UNKNOWN)
