from .config import InkwellSettings, inkwell_settings
from .exceptions import (
    InkwellError,
    NotFoundError,
    RenderError,
    StoreError,
    UnauthorizedError,
    ValidationFailure,
)
from .schemas.parameter import PaginationParams

__all__ = [
    "InkwellError",
    "InkwellSettings",
    "NotFoundError",
    "PaginationParams",
    "RenderError",
    "StoreError",
    "UnauthorizedError",
    "ValidationFailure",
    "inkwell_settings",
]
