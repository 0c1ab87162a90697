"""
Guest group model
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.core.db import Base

class GuestGroup(Base):
    __tablename__ = "guest_groups"

    # Ids are client generated, so they are only unique within one event
    event_id = Column(String(36), ForeignKey("events.id"), primary_key=True, index=True)
    id = Column(String(36), primary_key=True)
    name = Column(String(100), nullable=False)
    color = Column(String(32), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    event = relationship("Event", back_populates="guest_groups")
