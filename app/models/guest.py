"""
Guest model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from app.core.db import Base

class Guest(Base):
    __tablename__ = "guests"

    # Ids are client generated, so they are only unique within one event
    event_id = Column(String(36), ForeignKey("events.id"), primary_key=True, index=True)
    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    # Plain references: a dangling group or parent is tolerated by readers
    group_id = Column(String(36), nullable=True)
    parent_id = Column(String(36), nullable=True)
    confirmed = Column(Boolean, default=False)
    priority = Column(Integer, default=3)
    photo_url = Column(Text, nullable=True)
    is_root = Column(Boolean, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    event = relationship("Event", back_populates="guests")
