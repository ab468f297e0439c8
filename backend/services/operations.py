# backend/services/operations.py
import functools
import logging

from schemas.result import Err

logger = logging.getLogger(__name__)


def service_operation(action: str):
    """
    Turn anything a service method raises into a failure envelope.

    ValueError carries a message meant for the caller (bad argument, broken
    invariant) and is passed through. Everything else is logged and reported
    with a generic message, after rolling the session back.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            except ValueError as exc:
                self.db.rollback()
                return Err.invalid(str(exc))
            except Exception:
                self.db.rollback()
                logger.exception("Unexpected error while %s", action)
                return Err.internal(f"An unexpected error occurred while {action}")
        return wrapper
    return decorator
