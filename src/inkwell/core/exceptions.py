class InkwellError(Exception):
    """Base class for all Inkwell errors."""


class NotFoundError(InkwellError, ValueError):
    """Raised when a row is absent, or hidden from the caller.

    Unpublished content requested by a non-admin raises this too, so the
    caller cannot tell hidden rows from missing ones.
    """


class UnauthorizedError(InkwellError):
    """Raised when the caller's identity lacks the required capability."""


class ValidationFailure(InkwellError, ValueError):
    """Raised on malformed input: forms, cookies, session ids."""


class StoreError(InkwellError, RuntimeError):
    """Raised when the underlying database operation fails."""


class RenderError(InkwellError):
    """Raised when markdown or template rendering fails."""
