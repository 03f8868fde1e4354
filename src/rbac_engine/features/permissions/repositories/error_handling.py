"""Translation of asyncpg failures into engine exceptions."""

import asyncio
import functools
import logging
from typing import Any, Callable

import asyncpg

from ....core.exceptions import (
    ConflictError,
    NotFoundError,
    RBACError,
    StorageError,
    StorageUnavailableError,
)


logger = logging.getLogger(__name__)


# Failures where the store could not be reached at all
UNAVAILABLE_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.exceptions.CannotConnectNowError,
    asyncpg.exceptions.ConnectionDoesNotExistError,
    asyncpg.exceptions.TooManyConnectionsError,
    asyncpg.exceptions.InterfaceError,
)


def storage_error_handler(operation_name: str) -> Callable:
    """Decorator mapping driver exceptions of a repository coroutine.

    Usage:
        @storage_error_handler("delete role")
        async def delete_role(self, role_id):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except RBACError:
                raise
            except asyncpg.exceptions.UniqueViolationError as e:
                raise ConflictError(
                    f"Failed to {operation_name}: duplicate entry",
                    details={"constraint": getattr(e, "constraint_name", None)},
                ) from e
            except asyncpg.exceptions.ForeignKeyViolationError as e:
                raise NotFoundError(
                    f"Failed to {operation_name}: referenced entity does not exist",
                    details={"constraint": getattr(e, "constraint_name", None)},
                ) from e
            except UNAVAILABLE_ERRORS as e:
                logger.error(f"Permission store unavailable during {operation_name}: {e}")
                raise StorageUnavailableError(f"Permission store unavailable: {e}") from e
            except Exception as e:
                logger.error(f"Failed to {operation_name}: {e}")
                raise StorageError(f"Failed to {operation_name}: {e}") from e

        return wrapper
    return decorator
