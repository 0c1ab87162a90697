"""
Event model
"""

from datetime import datetime
from sqlalchemy import Column, String, Date, DateTime, Float, Text
from sqlalchemy.orm import relationship

from app.core.db import Base

class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    event_date = Column(Date, nullable=True)
    budget_total = Column(Float, nullable=False, default=0)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    guests = relationship("Guest", back_populates="event", cascade="all, delete-orphan")
    guest_groups = relationship("GuestGroup", back_populates="event", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="event", cascade="all, delete-orphan")
