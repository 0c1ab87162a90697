"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .state import *
from .actions import *
from .sync import *
from .portable import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "EventCreate",
    "EventResponse",
    "BudgetSummary",
    "CamelModel",
    "Guest",
    "GuestGroup",
    "ExpenseItem",
    "AppState",
    "Action",
    "ActionType",
    "SyncStrategy",
    "GuestDelta",
    "GuestGroupDelta",
    "ExpenseDelta",
    "DeltaChanges",
    "FullSyncPayload",
    "SyncResult",
    "PortableGuestGroup",
    "PortableGuest",
    "PortableExpense",
    "PortableState",
]
