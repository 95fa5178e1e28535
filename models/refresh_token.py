"""
RefreshToken model: one row per issued refresh token so sessions can be rotated and revoked.
Fields:
- jti (unique) - shared with the sibling access token
- user_id (String(36)) - FK to users.id
- token - the exact refresh token string handed to the client
- expires_at
- is_revoked - flips to True on rotation or logout; rows are never deleted
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    jti = Column(String(64), nullable=False, unique=True, index=True)
    token = Column(Text, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    is_revoked = Column(Boolean, default=False, nullable=False)

    user = relationship("User", back_populates="refresh_tokens")

    def __repr__(self):
        return f"<RefreshToken jti={self.jti} revoked={self.is_revoked}>"
