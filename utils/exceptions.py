"""
Domain errors raised by views, decorators and the token helpers.

They subclass werkzeug's HTTPException so they can be raised anywhere during a
request and are rendered by the same handler as abort(...).
"""
from werkzeug.exceptions import BadRequest, Conflict, InternalServerError, Unauthorized


class DuplicateEmail(BadRequest):
    description = "Email already registered"


class DuplicateToken(Conflict):
    description = "Refresh token already stored"


class InvalidCredentials(Unauthorized):
    description = "Invalid credentials"


class IncorrectPassword(BadRequest):
    description = "Current password is incorrect"


class TokenExpired(Unauthorized):
    description = "Token expired"


class TokenInvalid(Unauthorized):
    description = "Invalid token"


class SigningError(InternalServerError):
    description = "Token signing secret is not configured"
