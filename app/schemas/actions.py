"""
Editing actions applied to an AppState by the history reducer
"""

from enum import Enum
from typing import Any
from pydantic import BaseModel

class ActionType(str, Enum):
    SET_STATE = "SET_STATE"
    UPDATE_BUDGET_TOTAL = "UPDATE_BUDGET_TOTAL"
    ADD_EXPENSE = "ADD_EXPENSE"
    UPDATE_EXPENSE = "UPDATE_EXPENSE"
    DELETE_EXPENSE = "DELETE_EXPENSE"
    ADD_GUEST = "ADD_GUEST"
    UPDATE_GUEST = "UPDATE_GUEST"
    BULK_ADD_GUESTS = "BULK_ADD_GUESTS"
    DELETE_GUEST = "DELETE_GUEST"
    TOGGLE_GUEST_CONFIRM = "TOGGLE_GUEST_CONFIRM"
    ADD_GUEST_GROUP = "ADD_GUEST_GROUP"
    DELETE_GUEST_GROUP = "DELETE_GUEST_GROUP"

class Action(BaseModel):
    """A single edit.

    ``payload`` depends on ``type``: a full record for add/update actions, an id
    for delete/toggle actions, a number for the budget, a list of guests for a
    bulk add and a whole AppState for SET_STATE.
    """
    type: ActionType
    payload: Any = None

    class Config:
        frozen = True
