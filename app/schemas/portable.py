"""
Portable (id-less) backup format: guests reference groups and parents by name
"""

from typing import List, Optional
from pydantic import Field

from app.schemas.state import CamelModel

class PortableGuestGroup(CamelModel):
    name: str
    color: str = "#94a3b8"

class PortableGuest(CamelModel):
    name: str
    group_name: Optional[str] = ""
    confirmed: bool = False
    parent_name: Optional[str] = None
    priority: int = Field(3, ge=1, le=5)
    photo_url: Optional[str] = None
    is_root: Optional[bool] = None

class PortableExpense(CamelModel):
    category: str
    supplier: Optional[str] = ""
    estimated_value: float = 0
    actual_value: float = 0
    is_contracted: bool = False
    include: bool = True

class PortableState(CamelModel):
    budget_total: Optional[float] = None
    guest_groups: Optional[List[PortableGuestGroup]] = None
    guests: List[PortableGuest] = Field(default_factory=list)
    expenses: List[PortableExpense] = Field(default_factory=list)
    exported_at: Optional[str] = None
