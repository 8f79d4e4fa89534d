"""
Lead model — one row per intake form submission.
"""
import uuid

from sqlalchemy import Column, Text, DateTime
from sqlalchemy.sql import func

from app.database import Base


def _iso(value):
    return value.isoformat() if value else None


class Lead(Base):
    __tablename__ = 'leads'

    id = Column(Text, primary_key=True, default=lambda: str(uuid.uuid4()))
    short_hash = Column(Text, nullable=False, unique=True)  # public results-link id
    first_name = Column(Text, default='')
    last_name = Column(Text, default='')
    company_name = Column(Text, default='')
    website_url = Column(Text, nullable=True)
    email = Column(Text, nullable=False)
    business_type = Column(Text, default='')
    business_description = Column(Text, default='')
    marketing_location = Column(Text, default='')
    city = Column(Text, default='')
    country = Column(Text, default='')
    ghl_contact_id = Column(Text, nullable=True)
    user_id = Column(Text, nullable=True, index=True)
    status = Column(Text, nullable=False, default='new')                  # admin-edited
    generation_status = Column(Text, nullable=False, default='pending')   # set by the generator
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            'id': self.id,
            'short_hash': self.short_hash,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'company_name': self.company_name,
            'website_url': self.website_url,
            'email': self.email,
            'business_type': self.business_type,
            'business_description': self.business_description,
            'marketing_location': self.marketing_location,
            'city': self.city,
            'country': self.country,
            'ghl_contact_id': self.ghl_contact_id,
            'user_id': self.user_id,
            'status': self.status,
            'generation_status': self.generation_status,
            'created_at': _iso(self.created_at),
        }

    def to_public_dict(self):
        """Subset exposed on the public results endpoint."""
        return {
            'id': self.id,
            'first_name': self.first_name,
            'company_name': self.company_name,
            'generation_status': self.generation_status,
        }
