"""
Event state schemas: guests, groups, expenses and the aggregate AppState
"""

from typing import List, Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Immutable record exchanged with collaborators using camelCase keys"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True
        # NaN and Infinity have no JSON form and never compare equal
        allow_inf_nan = False

    def to_payload(self) -> dict:
        """Dump using the external (camelCase) field names"""
        return self.model_dump(mode="json", by_alias=True)

class GuestGroup(CamelModel):
    """Named, coloured set of guests"""
    id: str
    name: str
    color: str = "#94a3b8"

class Guest(CamelModel):
    """Guest record; ``parent_id`` names the guest who brought this one"""
    id: str
    name: str
    group_id: Optional[str] = None
    confirmed: bool = False
    parent_id: Optional[str] = None
    priority: int = Field(3, ge=1, le=5)
    photo_url: Optional[str] = None
    is_root: Optional[bool] = None

class ExpenseItem(CamelModel):
    """Budget line; ``include`` decides whether it counts at all"""
    id: str
    category: str
    supplier: str = ""
    estimated_value: float = 0
    actual_value: float = 0
    is_contracted: bool = False
    include: bool = True

class AppState(CamelModel):
    """Aggregate root for one event: the unit of undo/redo and of sync"""
    budget_total: float = 0
    expenses: List[ExpenseItem] = Field(default_factory=list)
    guests: List[Guest] = Field(default_factory=list)
    guest_groups: List[GuestGroup] = Field(default_factory=list)

    def total_items(self) -> int:
        return len(self.expenses) + len(self.guests) + len(self.guest_groups)
