"""
Initial template for a new event: guest groups, expense categories and budget
"""

import uuid
from typing import List, Optional

from app.core.config import settings
from app.schemas.state import AppState, ExpenseItem, GuestGroup

INITIAL_CATEGORIES = [
    "Planner/Coordinator",
    "Receptionists",
    "Ceremony Venue",
    "Reception Venue",
    "Generator",
    "Security/Cleaning",
    "Decoration",
    "Photographer",
    "Video",
    "Catering",
    "Waiters",
    "Beer/Drinks",
    "Cocktail Bar",
    "Cake",
    "Sweets",
    "Candy Cups",
    "Stationery",
    "Bride's Dress",
    "Bride's Accessories",
    "Bride's Day",
    "Groom's Attire",
    "Ceremony Musicians",
    "Band/DJ",
    "Stage Lighting",
    "Party Favors",
    "Honeymoon",
    "Wedding Night",
]

INITIAL_GROUPS = [
    ("Couple", "#f43f5e"),
    ("Bride's Family", "#d946ef"),
    ("Groom's Family", "#8b5cf6"),
    ("Friends", "#0ea5e9"),
    ("Work", "#10b981"),
]

def new_id() -> str:
    """Client-side stable identifier shared by local and persisted copies"""
    return str(uuid.uuid4())

def generate_initial_groups() -> List[GuestGroup]:
    return [GuestGroup(id=new_id(), name=name, color=color) for name, color in INITIAL_GROUPS]

def generate_initial_expenses() -> List[ExpenseItem]:
    return [
        ExpenseItem(
            id=new_id(),
            category=category,
            supplier="",
            estimated_value=0,
            actual_value=0,
            is_contracted=False,
            include=True,
        )
        for category in INITIAL_CATEGORIES
    ]

def generate_initial_state(budget_total: Optional[float] = None) -> AppState:
    """Fresh template state; every call yields new ids"""
    if budget_total is None:
        budget_total = settings.DEFAULT_BUDGET_TOTAL
    return AppState(
        budget_total=budget_total,
        expenses=generate_initial_expenses(),
        guest_groups=generate_initial_groups(),
        guests=[],
    )
