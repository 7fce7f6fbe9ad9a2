"""
Request-time auth gate.

jwt_required() resolves the caller from the bearer access token and re-reads
the user row on every request, so a deactivated user is rejected on the next
call even while their access token is still unexpired. jwt_optional() does
the same but lets anonymous callers through. roles_required() is stacked
below jwt_required() and only looks at the resolved identity.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import request, g, abort
from werkzeug.exceptions import HTTPException

from api.extensions import get_storage
from models.user import Role, User
from utils.security import decode_access_token


@dataclass(frozen=True)
class Identity:
    id: int
    name: str
    email: str
    role: Role


def _bearer_token() -> Optional[str]:
    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_identity(token: str) -> Identity:
    """Verify an access token and load its still-active user."""
    decoded = decode_access_token(token)
    user = get_storage().get(User, decoded["user_id"])
    if not user:
        abort(401, description="User not found")
    if not user.is_active:
        abort(401, description="User inactive")
    return Identity(id=user.id, name=user.name, email=user.email, role=Role(user.role))


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = _bearer_token()
            if not token:
                abort(401, description="Access token required")
            g.current_user = resolve_identity(token)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def jwt_optional():
    """Attach the caller's identity when one can be resolved, else None."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.current_user = None
            token = _bearer_token()
            if token:
                try:
                    g.current_user = resolve_identity(token)
                except HTTPException:
                    g.current_user = None
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def roles_required(*roles: Role):
    """
    Allow access if the resolved identity has ANY of the given roles.
    Must sit below @jwt_required(); without an identity the request is 401.
    """
    allowed = set(roles)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            identity = getattr(g, "current_user", None)
            if identity is None:
                abort(401, description="User not authenticated")
            if identity.role not in allowed:
                abort(403, description="Access denied. Insufficient permissions")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
