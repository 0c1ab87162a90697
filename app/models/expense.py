"""
Expense model
"""

from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Float, ForeignKey
from sqlalchemy.orm import relationship

from app.core.db import Base

class Expense(Base):
    __tablename__ = "expenses"

    # Ids are client generated, so they are only unique within one event
    event_id = Column(String(36), ForeignKey("events.id"), primary_key=True, index=True)
    id = Column(String(36), primary_key=True)
    category = Column(String(255), nullable=False)
    supplier = Column(String(255), nullable=True)
    estimated_value = Column(Float, default=0)
    actual_value = Column(Float, default=0)
    is_contracted = Column(Boolean, default=False)
    include = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    event = relationship("Event", back_populates="expenses")
