from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Sequence, Type, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError

from .exceptions import StoreError
from .models import Model

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql import ColumnElement, Select


T = TypeVar("T", bound=Model)


class QuerySet(Generic[T]):
    """
    Represents a lazy database query for a specific model type.

    A QuerySet stores a SQLAlchemy `Select` statement and allows query
    conditions to be composed without executing the query immediately.
    Queries are executed only when calling an execution method like `fetch()`,
    `first()`, or `count()`.

    Examples:
        >>> qs = Article.objects.filter(Article.published.is_(True))

        >>> qs = (Article.objects.all()
        ...       .order_by(Article.created_at.desc()).offset(10).limit(5))
    """

    def __init__(self, model: Type[T], stmt: Select):
        self.model: Type[T] = model
        self._stmt: Select = stmt

    def _clone(self, stmt: Select | None = None) -> QuerySet[T]:
        """Return a new QuerySet instance; every modification is immutable."""
        return QuerySet(self.model, stmt if stmt is not None else self._stmt)

    async def _execute(self, db: AsyncSession, stmt: Any) -> Any:
        try:
            return await db.execute(stmt)
        except SQLAlchemyError as e:
            msg = f"Database error while querying {self.model.__name__}"
            raise StoreError(msg) from e

    # --- Chainable methods ---

    def filter(self, *conditions: ColumnElement[bool]) -> QuerySet[T]:
        """
        Add WHERE criteria to the query.

        Example:
            >>> Article.objects.filter(Article.alias == "hello")
            # SELECT * FROM article WHERE alias = 'hello';
        """
        if not conditions:
            return self
        return self._clone(self._stmt.where(*conditions))

    def order_by(self, *criterion: Any) -> QuerySet[T]:
        """
        Add ORDER BY criteria to the query.

        Example:
            >>> Article.objects.order_by(Article.created_at.desc())
            # SELECT * FROM article ORDER BY created_at DESC;
        """
        return self._clone(self._stmt.order_by(*criterion))

    def limit(self, count: int) -> QuerySet[T]:
        """
        Limit the number of records returned.

        Example:
            >>> articles = await Article.objects.limit(10).fetch(db)
            # SELECT * FROM article LIMIT 10;
        """
        return self._clone(self._stmt.limit(count))

    def offset(self, count: int) -> QuerySet[T]:
        """
        Apply an offset to the result set.

        Example:
            >>> articles = await Article.objects.offset(10).fetch(db)
            # SELECT * FROM article OFFSET 10;
        """
        return self._clone(self._stmt.offset(count))

    # --- Execution methods ---

    async def fetch(self, db: AsyncSession) -> Sequence[T]:
        """
        Execute query and return results as model instances.

        Example:
            >>> articles = await Article.objects.all().fetch(db)
            # SELECT * FROM article;
        """
        result = await self._execute(db, self._stmt)
        return result.scalars().unique().all()

    async def first(self, db: AsyncSession) -> T | None:
        """
        Execute query and return the first result or None.

        Example:
            >>> article = await Article.objects.all().first(db)
            # SELECT * FROM article LIMIT 1;
        """
        result = await self._execute(db, self._stmt.limit(1))
        return result.scalars().unique().one_or_none()

    async def count(self, db: AsyncSession) -> int:
        """
        Return total record count for the QuerySet.

        Example:
            >>> count = await ContactRequest.objects.all().count(db)
            # SELECT count(*) FROM (SELECT * FROM contacts) AS subquery;
        """
        count_stmt = select(func.count()).select_from(self._stmt.subquery())
        result = await self._execute(db, count_stmt)
        return result.scalar() or 0

    async def exists(self, db: AsyncSession) -> bool:
        """
        Check if any records exist matching the query.
        """
        return await self.count(db) > 0

    async def update(self, db: AsyncSession, **values: Any) -> int:
        """
        Execute bulk update on the QuerySet.

        Values may be plain literals or SQL expressions, which makes
        counter increments atomic at the database level.

        Example:
            >>> await Stats.objects.filter(Stats.date == day).update(
            ...     db, home_views=Stats.home_views + 1)
            # UPDATE stats SET home_views = home_views + 1 WHERE date = ...;
        """
        where_clause = self._stmt.whereclause
        # Prevent accidental full-table updates.
        if where_clause is None:
            msg = "Refusing to update without filters"
            raise ValueError(msg)

        stmt = update(self.model).where(where_clause).values(**values)
        result = await self._execute(db, stmt)
        return getattr(result, "rowcount", 0)

    async def delete(self, db: AsyncSession) -> int:
        """
        Delete all records matched by the query.

        Example:
            >>> await Paragraph.objects.filter(Paragraph.article_id == 3).delete(db)
            # DELETE FROM paragraph WHERE article_id = 3;
        """
        where_clause = self._stmt.whereclause
        # Prevent accidental full-table deletions.
        if where_clause is None:
            msg = "Refusing to delete without filters"
            raise ValueError(msg)

        stmt = delete(self.model).where(where_clause)
        result = await self._execute(db, stmt)
        return getattr(result, "rowcount", 0)
