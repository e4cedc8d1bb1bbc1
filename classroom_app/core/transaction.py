# classroom_app/core/transaction.py
"""Unit-of-work helpers: one database transaction per workflow operation."""
from functools import wraps
from typing import Awaitable, Callable, TypeVar
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import ConflictError

logger = logging.getLogger(__name__)

T = TypeVar('T')


async def run_in_transaction(
    session: AsyncSession,
    work: Callable[[AsyncSession], Awaitable[T]],
) -> T:
    """
    Run ``work`` inside a transaction on ``session``.

    Commits when ``work`` returns and rolls back when it raises, re-raising the
    original error. Unique-index violations detected by the database are
    surfaced as ``ConflictError`` so that the losing side of two concurrent
    writes gets a 409 instead of a 500.

    The session must not already be inside a transaction; ``session.begin()``
    raises ``InvalidRequestError`` in that case.
    """
    try:
        async with session.begin():
            return await work(session)
    except IntegrityError as e:
        logger.warning(f"Transaction aborted on integrity violation: {e.orig}")
        raise ConflictError("Operation conflicts with existing data") from e
    except Exception as e:
        logger.warning(f"Transaction aborted: {e.__class__.__name__}: {e}")
        raise


def transactional(method):
    """Run a service coroutine method inside ``run_in_transaction(self.db, ...)``."""
    @wraps(method)
    async def wrapper(self, *args, **kwargs):
        return await run_in_transaction(self.db, lambda session: method(self, *args, **kwargs))
    return wrapper
