"""
Transaction scope for service writes.

``TransactionManager`` replaces an implicit ambient transaction with an
explicit one.  Every service write goes through ``transaction(db)``,
and there is exactly one commit boundary per session:

- The outermost ``transaction(db)`` owns the session's transaction.  It
  commits on success and rolls back on error, including work the
  session started implicitly before the block (SQLAlchemy begins a
  transaction on the first query, even a plain read).
- A ``transaction(db)`` nested inside an owning one runs as a SAVEPOINT:
  a failure undoes only the inner block, and nothing is committed until
  the owner exits.

Callers that want several service calls to land together wrap them in
``transaction(db)`` themselves, or use ``session()``, which opens a new
session already inside an owning scope.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from conduit.database import async_session

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Marker in ``AsyncSession.info`` while an owning scope is open.
_OWNER_KEY = "conduit.transaction_owner"


class TransactionManager:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_factory = session_factory or async_session

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a new session that is committed when the block exits
        normally and rolled back when it raises.  Service calls made
        with it join this scope instead of committing on their own.
        """
        async with self._session_factory() as db:
            async with self.transaction(db):
                yield db

    @asynccontextmanager
    async def transaction(self, db: AsyncSession) -> AsyncIterator[AsyncSession]:
        """Make the enclosed block atomic within *db*."""
        if db.info.get(_OWNER_KEY):
            try:
                async with db.begin_nested():
                    yield db
            except Exception as exc:
                logger.warning("Rolled back to savepoint: %s", exc)
                raise
            return

        db.info[_OWNER_KEY] = True
        try:
            yield db
            await db.commit()
        except Exception as exc:
            await db.rollback()
            logger.warning("Transaction rolled back: %s", exc)
            raise
        finally:
            db.info.pop(_OWNER_KEY, None)

    async def run_in_transaction(
        self, db: AsyncSession, fn: Callable[[AsyncSession], Awaitable[T]]
    ) -> T:
        """Await ``fn(db)`` inside ``transaction(db)`` and return its result."""
        async with self.transaction(db):
            return await fn(db)
