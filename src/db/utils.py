from collections.abc import Awaitable, Callable
import functools
import logging
from typing import Concatenate, ParamSpec, Protocol, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")


class HasSession(Protocol):
    @property
    def session(self) -> AsyncSession: ...


S = TypeVar("S", bound=HasSession)


def transactional(
    func: Callable[Concatenate[S, P], Awaitable[T]],
) -> Callable[Concatenate[S, P], Awaitable[T]]:
    """
    Decorator for write-operations on objects exposing an AsyncSession as ``session``.
    - Commits the session when the wrapped coroutine completes successfully.
    - Rolls back the session on any exception and re-raises it.
    """

    @functools.wraps(func)
    async def wrapper(self: S, *args: P.args, **kwargs: P.kwargs) -> T:
        session = self.session
        try:
            result = await func(self, *args, **kwargs)
            await session.commit()
            return result
        except Exception as e:
            await session.rollback()
            logger.error("Transactional error in %s: %s", getattr(func, "__name__", str(func)), e)
            raise

    return wrapper


__all__ = ["transactional"]
