import asyncio
from collections.abc import Callable
import functools
import logging
from typing import Any, TypeVar, cast

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from core.exceptions import DatabaseError

logger = logging.getLogger(__name__)

T = TypeVar('T')
AsyncFunc = Callable[..., Any]
AsyncFuncT = Callable[..., T]


def with_retry(max_retries: int = 3, log_prefix: str = ""):
    """Decorator for retrying function execution on OperationalError.

    Args:
        max_retries: Maximum number of attempts
        log_prefix: Prefix for log messages
    """

    def decorator(func: AsyncFuncT) -> AsyncFuncT:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            func_name = getattr(func, "__name__", str(func))

            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except OperationalError as e:
                    entity_info = _extract_entity_info(func_name, args, kwargs)

                    if attempt < max_retries - 1:
                        logger.warning(
                            "OperationalError while %s %s (attempt %s): %s",
                            log_prefix or func_name,
                            entity_info,
                            attempt + 1,
                            e,
                        )
                        await asyncio.sleep(0.1 * (2**attempt))
                        continue
                    logger.error("Database error while %s %s: %s", log_prefix or func_name, entity_info, e)
                    raise DatabaseError() from e
                except SQLAlchemyError as e:
                    entity_info = _extract_entity_info(func_name, args, kwargs)
                    logger.error("Database error while %s %s: %s", log_prefix or func_name, entity_info, e)
                    raise DatabaseError() from e

            raise DatabaseError()

        return cast(AsyncFuncT, wrapper)

    return decorator


def handle_db_errors(entity_name: str = ""):
    """Decorator for handling database errors without retries.

    Used for operations that do not require retries,
    for example, write operations.

    Args:
        entity_name: Entity name for logging
    """

    def decorator(func: AsyncFunc) -> AsyncFunc:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            func_name = getattr(func, "__name__", str(func))

            try:
                return await func(*args, **kwargs)
            except IntegrityError:
                # Constraint violations are left to the caller
                raise
            except SQLAlchemyError as e:
                entity_info = _extract_entity_info(func_name, args, kwargs)
                log_prefix = f"{entity_name} " if entity_name else ""
                logger.error("Database error while %s%s %s: %s", log_prefix, func_name, entity_info, e)
                raise DatabaseError() from e

        return wrapper

    return decorator


def _extract_entity_info(func_name: str, args: tuple, kwargs: dict) -> str:
    """Extracts entity information from function arguments for logging.

    The first positional argument is the repository instance; the second is
    either an identifier or an entity with an ``id`` attribute.
    """
    if len(args) > 1:
        target = args[1]
        if isinstance(target, int | str):
            return str(target)
        target_id = getattr(target, "id", None)
        if target_id is not None:
            return f"id={target_id}"

    for key in ("id", "post_id"):
        if key in kwargs:
            return f"{key}={kwargs[key]}"

    return ""
