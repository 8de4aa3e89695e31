from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Self

from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .exceptions import DoesNotExistError, MultipleObjectsReturnedError

if TYPE_CHECKING:
    from .manager import ModelManager


class Model(AsyncAttrs, DeclarativeBase):
    """
    Base class for all database models.
    Provides an automatic `objects` manager and an `id` primary key.

    Example:
        >>> class Article(Model):
        ...     __tablename__ = "article"
        ...     title: Mapped[str] = mapped_column()
    """

    __abstract__ = True
    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    objects: ClassVar[ModelManager[Self]]  # type: ignore[invalid-type-arguments]

    DoesNotExist = DoesNotExistError
    MultipleObjectsReturned = MultipleObjectsReturnedError

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        from .manager import ModelManager

        if not cls.__dict__.get("__abstract__"):
            cls.objects = ModelManager(cls)
