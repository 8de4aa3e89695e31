from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from inkwell.core.config import inkwell_settings


class PaginationParams(BaseModel):
    """
    Offset/limit window for article listings.

    Examples
    --------
    Values are clamped to the configured bounds::

        >>> params = PaginationParams(offset=-5, limit=9999)  # max is 100
        >>> params.offset, params.limit
        (0, 100)
    """

    model_config = ConfigDict(extra="ignore")

    offset: Annotated[int, Field(default=0, description="Raw skip count")]
    limit: Annotated[
        int,
        Field(
            default=inkwell_settings.DEFAULT_LIST_PER_PAGE,
            description="Items per page",
        ),
    ]

    @model_validator(mode="after")
    def _validate_bounds(self) -> Self:
        """Clamps values to system limits."""
        self.limit = max(
            inkwell_settings.MIN_LIST_PER_PAGE,
            min(self.limit, inkwell_settings.MAX_API_LIMIT),
        )
        self.offset = max(0, self.offset)
        return self
