"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT
- JTI generation for token identifiers
- SHA-256 digests of refresh tokens for storage

Access and refresh tokens carry the same {user_id, email, role} payload but
are signed with distinct secrets and carry a "type" claim, so one can never
be replayed as the other.
"""
from __future__ import annotations

import hashlib
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError

from flask import current_app

from utils.exceptions import SigningError, TokenExpired, TokenInvalid

ACCESS = "access"
REFRESH = "refresh"

_SECRETS = {ACCESS: "JWT_SECRET", REFRESH: "JWT_REFRESH_SECRET"}
_EXPIRES = {ACCESS: "ACCESS_TOKEN_EXPIRES", REFRESH: "REFRESH_TOKEN_EXPIRES"}

ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def hash_token(token: str) -> str:
    """SHA-256 hex digest under which a refresh token is stored."""
    return hashlib.sha256(token.encode()).hexdigest()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _secret(token_type: str) -> str:
    secret = current_app.config.get(_SECRETS[token_type])
    if not secret:
        raise SigningError(f"{_SECRETS[token_type]} is not configured")
    return secret


def token_payload(user) -> Dict[str, Any]:
    """Claims identifying a user inside both token kinds."""
    role = getattr(user.role, "value", user.role)
    return {"user_id": user.id, "email": user.email, "role": role}


def _create_token(payload: Dict[str, Any], token_type: str, expires_delta: Optional[timedelta]) -> str:
    now = _now()
    exp = now + (expires_delta if expires_delta is not None else current_app.config[_EXPIRES[token_type]])
    claims = {
        "user_id": payload["user_id"],
        "email": payload["email"],
        "role": payload["role"],
        "iss": current_app.config.get("JWT_ISSUER", "contact-form-api"),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
        "type": token_type,
        "jti": generate_jti(),
    }
    return jwt.encode(claims, _secret(token_type), algorithm=current_app.config["JWT_ALGORITHM"])


def create_access_token(payload: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Sign a short-lived access token (ACCESS_TOKEN_EXPIRES, 15 minutes by default)."""
    return _create_token(payload, ACCESS, expires_delta)


def create_refresh_token(payload: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Sign a long-lived refresh token (REFRESH_TOKEN_EXPIRES, 7 days by default)."""
    return _create_token(payload, REFRESH, expires_delta)


def decode_token(token: str, expected_type: str = ACCESS) -> Dict[str, Any]:
    """
    Decode and validate a JWT. Raises TokenExpired or TokenInvalid on
    expired jwt, bad signature, malformed input or wrong token type.
    expected type must be "access" or "refresh".
    """
    try:
        decoded = jwt.decode(
            token,
            _secret(expected_type),
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            options={"require": ["exp", "iat", "type", "user_id"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpired()
    except jwt.InvalidTokenError:
        raise TokenInvalid()

    if decoded.get("type") != expected_type:
        raise TokenInvalid("Wrong token type")
    return decoded


def decode_access_token(token: str) -> Dict[str, Any]:
    return decode_token(token, ACCESS)


def decode_refresh_token(token: str) -> Dict[str, Any]:
    return decode_token(token, REFRESH)


def expiry_of(decoded: Dict[str, Any]) -> datetime:
    """The exp claim as naive UTC, the form stored in expires_at columns."""
    return datetime.fromtimestamp(decoded["exp"], tz=timezone.utc).replace(tzinfo=None)
