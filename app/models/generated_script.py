"""
GeneratedScript model — one row per title, append-only.

(lead_id, order_index) is unique so a re-run job can never duplicate a position.
"""
import uuid

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from app.database import Base


class GeneratedScript(Base):
    __tablename__ = 'generated_scripts'

    id = Column(Text, primary_key=True, default=lambda: str(uuid.uuid4()))
    lead_id = Column(Text, ForeignKey('leads.id', ondelete='CASCADE'), nullable=False, index=True)
    title = Column(Text, nullable=False)
    script_body = Column(Text, nullable=False)
    order_index = Column(Integer, nullable=False)  # 1-based
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint('lead_id', 'order_index', name='uq_script_lead_order'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'lead_id': self.lead_id,
            'title': self.title,
            'script_body': self.script_body,
            'order_index': self.order_index,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
