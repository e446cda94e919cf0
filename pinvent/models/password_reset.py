from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey

from pinvent.core.database import Base


class PasswordResetToken(Base):
    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True, index=True)
    # One live token per user
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)
    # SHA-256 hex digest; the raw token is never stored
    token_hash = Column(String(64), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    expires_at = Column(DateTime, nullable=False)

    @property
    def is_expired(self) -> bool:
        expires = self.expires_at
        # SQLite hands back naive datetimes
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return expires <= datetime.now(timezone.utc)
