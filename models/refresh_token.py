"""
RefreshToken model: stores opaque refresh tokens so they can be looked up
and revoked.
Fields:
- token (primary key, 64 hex chars)
- user_id (String(36)) - FK to users.id
- created_at, updated_at, expires_at
- revoked_at (null while the token is usable; never cleared once set)
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from models.base_model import Base, TimestampMixin, UTCDateTime, utcnow


class RefreshToken(TimestampMixin, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(64), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(UTCDateTime(), nullable=False)
    revoked_at = Column(UTCDateTime(), nullable=True)

    user = relationship("User", back_populates="refresh_tokens")

    def is_active(self, now: datetime | None = None) -> bool:
        """Usable iff not revoked and now is strictly before expires_at."""
        now = now or utcnow()
        return self.revoked_at is None and now < self.expires_at

    def __repr__(self):
        return f"<RefreshToken user={self.user_id} expires_at={self.expires_at}>"
