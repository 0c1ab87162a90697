"""
Event-related Pydantic schemas
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field

class EventCreate(BaseModel):
    """Schema for creating an event"""
    name: str = Field(..., min_length=1)
    event_date: Optional[date] = None
    budget_total: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    description: Optional[str] = None

class EventResponse(BaseModel):
    """Basic event response"""
    id: str
    name: str
    event_date: Optional[date] = None
    budget_total: float
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class BudgetSummary(BaseModel):
    """Spend figures derived from the expense list"""
    total_budget: float
    total_contracted: float
    total_projected: float
    total_cost: float
    balance: float
    guest_count: int
    confirmed_count: int
    cost_per_guest: float
    progress_percent: int
