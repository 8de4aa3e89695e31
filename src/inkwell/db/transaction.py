from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

from sqlalchemy.exc import SQLAlchemyError

from .exceptions import StoreError

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager
    from types import TracebackType

    from sqlalchemy.ext.asyncio import AsyncSession


class Atomic:
    """
    Async transaction block over an `AsyncSession`.

    Commits on success and rolls back on exception. When the session is
    already inside a transaction a SAVEPOINT is used instead, so blocks
    nest. Database errors leave the block as `StoreError`.

    Args:
        db: SQLAlchemy AsyncSession instance.

    Example:
        >>> async with atomic(db):
        ...     row = await Stats.objects.get(db, Stats.date == day)
        ...     row.article_views = {**row.article_views, "3": 1}
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self._cm: AbstractAsyncContextManager[Any] | None = None

    def _get_transaction_cm(self) -> AbstractAsyncContextManager[Any]:
        if self.db.in_transaction():
            return self.db.begin_nested()
        return self.db.begin()

    async def __aenter__(self) -> Self:
        self._cm = self._get_transaction_cm()
        await self._cm.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._cm is None:
            return
        try:
            await self._cm.__aexit__(exc_type, exc, tb)
        except SQLAlchemyError as e:
            msg = "Database error while committing transaction"
            raise StoreError(msg) from e
        if isinstance(exc, SQLAlchemyError):
            msg = "Database error inside transaction"
            raise StoreError(msg) from exc


def atomic(db: AsyncSession) -> Atomic:
    """
    Factory helper for creating an Atomic manager.

    Example:
        >>> async with atomic(db):
        ...     await do_work()
    """
    return Atomic(db)
