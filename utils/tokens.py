"""
Refresh token store.

A refresh token is only honoured while its row exists, is not revoked and has
not expired; a valid signature alone is never enough. Every helper takes the
DBStorage explicitly.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from models.base_model import utcnow
from models.refresh_token import RefreshToken
from utils.exceptions import DuplicateToken
from utils.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    expiry_of,
    hash_token,
    token_payload,
)

logger = logging.getLogger(__name__)


def store_refresh_token(storage, token: str, user_id: int) -> RefreshToken:
    """Persist a freshly issued refresh token; expires_at comes from its exp claim."""
    decoded = decode_refresh_token(token)
    rt = RefreshToken(token_hash=hash_token(token), user_id=user_id, expires_at=expiry_of(decoded), revoked=False)
    storage.new(rt)
    try:
        storage.save()
    except IntegrityError as err:
        if "unique" in str(err.orig).lower():
            raise DuplicateToken()
        raise
    return rt


def issue_token_pair(storage, user) -> Dict[str, str]:
    """Issue an access/refresh pair for user and store the refresh token."""
    payload = token_payload(user)
    access_token = create_access_token(payload)
    refresh_token = create_refresh_token(payload)
    store_refresh_token(storage, refresh_token, user.id)
    return {"access_token": access_token, "refresh_token": refresh_token}


def is_refresh_token_valid(storage, token: str) -> bool:
    session = storage.get_session()
    found = (
        session.query(RefreshToken.id)
        .filter(
            RefreshToken.token_hash == hash_token(token),
            RefreshToken.revoked.is_(False),
            RefreshToken.expires_at > utcnow(),
        )
        .first()
    )
    return found is not None


def revoke_refresh_token(storage, token: str, user_id: Optional[int] = None) -> bool:
    """
    Mark one token revoked. Revoking an already revoked token is not an error.
    With user_id, only a token owned by that user is touched.
    """
    session = storage.get_session()
    query = session.query(RefreshToken).filter(RefreshToken.token_hash == hash_token(token))
    if user_id is not None:
        query = query.filter(RefreshToken.user_id == user_id)
    affected = query.update({RefreshToken.revoked: True}, synchronize_session=False)
    storage.save()
    return affected > 0


def revoke_all_user_refresh_tokens(storage, user_id: int) -> int:
    session = storage.get_session()
    affected = (
        session.query(RefreshToken)
        .filter(RefreshToken.user_id == user_id, RefreshToken.revoked.is_(False))
        .update({RefreshToken.revoked: True}, synchronize_session=False)
    )
    storage.save()
    logger.info("Revoked %d refresh token(s) for user %s", affected, user_id)
    return affected


def cleanup_expired_tokens(storage) -> int:
    """Delete every expired or revoked refresh token row."""
    session = storage.get_session()
    deleted = (
        session.query(RefreshToken)
        .filter(or_(RefreshToken.expires_at < utcnow(), RefreshToken.revoked.is_(True)))
        .delete(synchronize_session=False)
    )
    storage.save()
    logger.info("Cleaned up %d refresh token(s)", deleted)
    return deleted
