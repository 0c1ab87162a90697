"""
Synchronization payloads exchanged with the persistence collaborator
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from app.schemas.state import CamelModel, AppState, ExpenseItem, Guest, GuestGroup

class SyncStrategy(str, Enum):
    """How a pending change set should be transferred"""
    DELTA = "delta"
    FULL = "full"

class GuestDelta(CamelModel):
    created: List[Guest] = Field(default_factory=list)
    updated: List[Guest] = Field(default_factory=list)
    deleted: List[str] = Field(default_factory=list)

class GuestGroupDelta(CamelModel):
    created: List[GuestGroup] = Field(default_factory=list)
    updated: List[GuestGroup] = Field(default_factory=list)
    deleted: List[str] = Field(default_factory=list)

class ExpenseDelta(CamelModel):
    created: List[ExpenseItem] = Field(default_factory=list)
    updated: List[ExpenseItem] = Field(default_factory=list)
    deleted: List[str] = Field(default_factory=list)

class DeltaChanges(CamelModel):
    """Created/updated/deleted records per collection since the baseline"""
    budget_total: Optional[float] = None
    guests: GuestDelta = Field(default_factory=GuestDelta)
    guest_groups: GuestGroupDelta = Field(default_factory=GuestGroupDelta)
    expenses: ExpenseDelta = Field(default_factory=ExpenseDelta)

    def collections(self):
        return (self.guests, self.guest_groups, self.expenses)

    def total_changes(self) -> int:
        return sum(
            len(delta.created) + len(delta.updated) + len(delta.deleted)
            for delta in self.collections()
        )

    def is_empty(self) -> bool:
        return self.budget_total is None and self.total_changes() == 0

class FullSyncPayload(CamelModel):
    """Complete event data; replaces whatever the collaborator holds"""
    budget_total: float
    guest_groups: List[GuestGroup] = Field(default_factory=list)
    guests: List[Guest] = Field(default_factory=list)
    expenses: List[ExpenseItem] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: AppState) -> "FullSyncPayload":
        return cls(
            budget_total=state.budget_total,
            guest_groups=state.guest_groups,
            guests=state.guests,
            expenses=state.expenses,
        )

    def to_state(self) -> AppState:
        return AppState(
            budget_total=self.budget_total,
            guest_groups=self.guest_groups,
            guests=self.guests,
            expenses=self.expenses,
        )

class SyncResult(BaseModel):
    """Outcome of one sync attempt"""
    strategy: Optional[SyncStrategy] = None
    total_changes: int = 0
    total_items: int = 0
    skipped: bool = False
