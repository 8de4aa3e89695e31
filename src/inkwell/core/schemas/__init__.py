from .parameter import PaginationParams

__all__ = ["PaginationParams"]
