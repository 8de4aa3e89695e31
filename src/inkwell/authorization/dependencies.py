import logging

from fastapi import Depends, Request

from inkwell.authentication.dependencies import get_identity
from inkwell.authentication.schemas import Identity
from inkwell.core.exceptions import UnauthorizedError

from .permissions import AllowAny, BasePermission, IsAdmin

logger = logging.getLogger(__name__)


def permission_dependency(permissions: list[BasePermission]):
    """FastAPI dependency factory for checking permissions.

    The dependency runs before the route body, so a rejected caller never
    reaches the repository.

    Args:
        permissions (list[BasePermission]): A list of permissions to check.
    """

    async def permission_dependency_factory(
        request: Request, identity: Identity = Depends(get_identity)
    ) -> Identity:
        for permission in permissions:
            if not await permission.has_permission(request, identity):
                logger.debug(
                    "%s denied %s %s for %r",
                    type(permission).__name__,
                    request.method,
                    request.url.path,
                    identity,
                )
                msg = "Authentication required"
                raise UnauthorizedError(msg)
        return identity

    return permission_dependency_factory


allow_any = permission_dependency([AllowAny()])
admin_required = permission_dependency([IsAdmin()])
