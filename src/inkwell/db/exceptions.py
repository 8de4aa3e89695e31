from inkwell.core.exceptions import InkwellError, NotFoundError, StoreError


class InkwellDBError(InkwellError):
    """Base class for all Inkwell DB exceptions."""


class DoesNotExistError(InkwellDBError, NotFoundError):
    """Raised when a single object was expected but none was found."""


class MultipleObjectsReturnedError(InkwellDBError, ValueError):
    """Raised when a single object was expected but multiple were found."""


__all__ = [
    "DoesNotExistError",
    "InkwellDBError",
    "MultipleObjectsReturnedError",
    "StoreError",
]
