from .dependencies import admin_required, allow_any, permission_dependency
from .permissions import (
    AllowAny,
    BasePermission,
    IsAdmin,
    IsUser,
    is_admin,
    is_user,
)
from .visibility import ensure_visible, filter_visible, require_admin

__all__ = [
    "AllowAny",
    "BasePermission",
    "IsAdmin",
    "IsUser",
    "admin_required",
    "allow_any",
    "ensure_visible",
    "filter_visible",
    "is_admin",
    "is_user",
    "permission_dependency",
    "require_admin",
]
