from fastapi import Request

from .schemas import Identity


def get_identity(request: Request) -> Identity:
    """Identity resolved by `SessionAuthenticationMiddleware`.

    Falls back to the anonymous identity when the middleware is not
    installed, so routes can depend on it unconditionally.
    """
    identity = getattr(request.state, "identity", None)
    if not isinstance(identity, Identity):
        return Identity()
    return identity
