from .db import close_db, create_all, init_db
from .exceptions import (
    DoesNotExistError,
    InkwellDBError,
    MultipleObjectsReturnedError,
    StoreError,
)
from .models import Model
from .transaction import atomic

__all__ = [
    "DoesNotExistError",
    "InkwellDBError",
    "Model",
    "MultipleObjectsReturnedError",
    "StoreError",
    "atomic",
    "close_db",
    "create_all",
    "init_db",
]
