from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from .exceptions import DoesNotExistError, MultipleObjectsReturnedError, StoreError
from .models import Model
from .queryset import QuerySet

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql import ColumnElement

T = TypeVar("T", bound=Model)

# Signed 64-bit INTEGER range shared by SQLite and the usual id columns
PK_MIN = -(1 << 63)
PK_MAX = (1 << 63) - 1


def pk_in_range(pk: Any) -> bool:
    return not isinstance(pk, int) or PK_MIN <= pk <= PK_MAX


class ModelManager(Generic[T]):
    """
    Entry point for model-level database operations.

    Responsible for creating QuerySets and handling single-record actions.
    Database failures are rolled back and re-raised as `StoreError`.
    """

    def __init__(self, model: type[T]):
        self._model = model

    def _get_queryset(self) -> QuerySet[T]:
        """
        Return a fresh QuerySet instance for the model.
        """
        return QuerySet(self._model, select(self._model))

    def all(self) -> QuerySet[T]:
        """
        Return a QuerySet containing all records.
        """
        return self._get_queryset()

    def filter(self, *conditions: ColumnElement[bool]) -> QuerySet[T]:
        """
        Return a filtered QuerySet based on provided conditions.
        """
        return self._get_queryset().filter(*conditions)

    async def get(
        self,
        db: AsyncSession,
        *conditions: ColumnElement[bool],
    ) -> T:
        """
        Retrieve a single object matching the given conditions.

        Raises:
            DoesNotExistError: If no object matches.
            MultipleObjectsReturnedError: If more than one object matches.
        """
        stmt = select(self._model).where(*conditions).limit(2)
        try:
            result = await db.execute(stmt)
        except OverflowError as e:
            # A bound integer outside the column range cannot match any row
            msg = f"{self._model.__name__} matching query does not exist"
            raise DoesNotExistError(msg) from e
        except SQLAlchemyError as e:
            msg = f"Database error while reading {self._model.__name__}"
            raise StoreError(msg) from e
        objs = cast("list[T]", result.scalars().all())

        if not objs:
            msg = f"{self._model.__name__} matching query does not exist"
            raise DoesNotExistError(msg)
        if len(objs) > 1:
            msg = (
                f"get() returned more than one {self._model.__name__} "
                f"-- it returned {len(objs)}!"
            )
            raise MultipleObjectsReturnedError(msg)

        return objs[0]

    async def get_by_pk(
        self,
        db: AsyncSession,
        pk: int,
        *,
        pk_column: str = "id",
    ) -> T:
        """
        Retrieve a single object by its primary key.
        """
        if not pk_in_range(pk):
            msg = f"{self._model.__name__} with {pk_column} {pk} not found"
            raise DoesNotExistError(msg)
        return await self.get(db, getattr(self._model, pk_column) == pk)

    async def create(self, db: AsyncSession, **fields: Any) -> T:
        """
        Create and persist a new model instance.
        """
        try:
            instance: T = self._model(**fields)
            db.add(instance)
            await db.commit()
            await db.refresh(instance)

        except SQLAlchemyError as e:
            await db.rollback()
            msg = f"Database error while creating {self._model.__name__}: {e}"
            raise StoreError(msg) from e
        else:
            return instance

    async def get_or_create(
        self,
        db: AsyncSession,
        defaults: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> tuple[T, bool]:
        """
        Look up an object with the given kwargs, creating one if necessary.
        Return a tuple of (object, created), where created is a boolean.
        """
        conditions = [getattr(self._model, k) == v for k, v in kwargs.items()]
        try:
            instance = await self.get(db, *conditions)
            return instance, False
        except DoesNotExistError:
            params = {**kwargs, **(defaults or {})}
            try:
                instance = await self.create(db, **params)
            except StoreError:
                # Lost a creation race against a unique constraint; the
                # winner's row is the one to return.
                return await self.get(db, *conditions), False
            return instance, True

    async def update(self, db: AsyncSession, pk: Any, **fields: Any) -> T:
        """
        Update a single record by primary key and return the updated instance.

        Raises:
            DoesNotExistError: If the record with the given PK does not exist.
            StoreError: If a database integrity or connection error occurs.
        """
        if not pk_in_range(pk):
            msg = f"{self._model.__name__} with id {pk} not found"
            raise DoesNotExistError(msg)
        try:
            stmt = (
                update(self._model)
                .where(self._model.id == pk)
                .values(**fields)
                .returning(self._model)
            )

            result = await db.execute(stmt)
            instance = result.scalar_one_or_none()

            if instance is not None:
                await db.commit()

        except SQLAlchemyError as e:
            await db.rollback()
            msg = f"Database error while updating {self._model.__name__}"
            raise StoreError(msg) from e
        except Exception:
            await db.rollback()
            raise
        if instance is None:
            msg = f"{self._model.__name__} with id {pk} not found"
            raise DoesNotExistError(msg)
        return cast("T", instance)

    async def delete_by_pk(
        self,
        db: AsyncSession,
        pk: Any,
        *,
        pk_column: str = "id",
        raise_if_missing: bool = False,
    ) -> int:
        """
        Delete a single object by primary key and return the number of deleted rows.
        """
        if not pk_in_range(pk):
            if raise_if_missing:
                msg = f"{self._model.__name__} with id {pk} not found"
                raise DoesNotExistError(msg)
            return 0
        column = getattr(self._model, pk_column)
        stmt = delete(self._model).where(column == pk)

        try:
            result = await db.execute(stmt)
            await db.commit()
            count = getattr(result, "rowcount", 0)
        except SQLAlchemyError as e:
            await db.rollback()
            msg = f"Database error while deleting {self._model.__name__}"
            raise StoreError(msg) from e
        except Exception:
            await db.rollback()
            raise

        if raise_if_missing and count == 0:
            msg = f"{self._model.__name__} with id {pk} not found"
            raise DoesNotExistError(msg)

        return count
