from collections.abc import Iterable
from typing import Protocol, TypeVar

from inkwell.authentication.schemas import Identity
from inkwell.core.exceptions import NotFoundError, UnauthorizedError

from .permissions import is_admin


class Publishable(Protocol):
    published: bool


P = TypeVar("P", bound=Publishable)


def require_admin(identity: Identity) -> None:
    """Raise `UnauthorizedError` unless the identity is an admin."""
    if not is_admin(identity):
        msg = "Authentication required"
        raise UnauthorizedError(msg)


def filter_visible(items: Iterable[P], identity: Identity) -> list[P]:
    """Drop unpublished items for anyone but an admin."""
    if is_admin(identity):
        return list(items)
    return [item for item in items if item.published]


def ensure_visible(item: P, identity: Identity) -> P:
    """Return `item` if the identity may see it.

    Hidden items raise `NotFoundError`, the same error a missing row gives.
    """
    if not item.published and not is_admin(identity):
        msg = "Article matching query does not exist"
        raise NotFoundError(msg)
    return item
