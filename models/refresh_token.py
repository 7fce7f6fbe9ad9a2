"""
RefreshToken model: stores issued refresh tokens so they can be revoked.
Fields:
- token_hash (unique) - SHA-256 hex digest of the signed token string
- user_id (Integer) - FK to users.id, removed together with the user
- revoked (bool)
- created_at, expires_at (copied from the token's own exp claim)

The signed token grows with the email it carries, so only its fixed-size
digest is stored and looked up.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship

from models.base_model import Base, utcnow


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token_hash = Column(String(64), nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    revoked = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="refresh_tokens")

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id} revoked={self.revoked}>"
