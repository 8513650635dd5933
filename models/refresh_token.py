"""
RefreshToken model: stores SHA-256 hashes of opaque refresh tokens so we can
validate, rotate and revoke them. The raw token is only ever held by the client.
Fields:
- id (primary key)
- user_id (Integer) - FK to users.id
- token_hash (unique)
- expires_at, created_at
- revoked_at (null while the token is usable)
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey

from models.base_model import BaseModel, Base


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(64), nullable=False, unique=True)
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id}>"
