"""
Database models package
"""

from .event import Event
from .guest_group import GuestGroup
from .guest import Guest
from .expense import Expense

__all__ = ["Event", "GuestGroup", "Guest", "Expense"]
