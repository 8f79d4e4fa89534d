"""
UserProfile model — dashboard users and their admin flag.
"""
from sqlalchemy import Column, Text, Boolean, DateTime
from sqlalchemy.sql import func

from app.database import Base


class UserProfile(Base):
    __tablename__ = 'user_profiles'

    id = Column(Text, primary_key=True)
    email = Column(Text, default='')
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'is_admin': bool(self.is_admin),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
