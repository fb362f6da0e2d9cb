"""
Error taxonomy shared by routers and services.
"""
import logging
from contextlib import contextmanager

from redrelief.database import StoreUnavailable

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """A required query parameter is missing or empty."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class OperationFailed(Exception):
    """A store failure surfaced to the caller as a 500."""

    def __init__(self, message: str, details: str = ""):
        super().__init__(message)
        self.message = message
        self.details = details


@contextmanager
def store_failure(message: str):
    """Turn store errors raised inside the block into ``OperationFailed(message)``."""
    try:
        yield
    except StoreUnavailable as exc:
        logger.exception("%s: %s", message, exc)
        raise OperationFailed(message, str(exc)) from exc
