from abc import ABC, abstractmethod

from fastapi import Request

from inkwell.authentication.schemas import Identity


def is_admin(identity: Identity) -> bool:
    return identity.is_admin


def is_user(identity: Identity) -> bool:
    return identity.is_user


class BasePermission(ABC):
    @abstractmethod
    async def has_permission(self, request: Request, identity: Identity) -> bool:
        raise NotImplementedError


class AllowAny(BasePermission):
    """Allow access to anyone (authenticated or not)."""

    async def has_permission(
        self,
        request: Request,  # noqa: ARG002
        identity: Identity,  # noqa: ARG002
    ) -> bool:
        return True


class IsAdmin(BasePermission):
    """Allow access only to admin sessions."""

    async def has_permission(
        self,
        request: Request,  # noqa: ARG002
        identity: Identity,
    ) -> bool:
        return is_admin(identity)


class IsUser(BasePermission):
    """Allow access only to plain user sessions."""

    async def has_permission(
        self,
        request: Request,  # noqa: ARG002
        identity: Identity,
    ) -> bool:
        return is_user(identity)
