"""
Undo/redo history over AppState, driven by a pure reducer
"""

import logging
import math
from typing import Any, Callable, Dict, List

from app.schemas.actions import Action, ActionType
from app.schemas.state import AppState, ExpenseItem, Guest, GuestGroup

logger = logging.getLogger(__name__)

def _as(model, payload: Any):
    return payload if isinstance(payload, model) else model.model_validate(payload)

def _replace(items: List, record) -> List:
    """Swap the record with the same id, or return the list itself if absent"""
    if not any(item.id == record.id for item in items):
        return items
    return [record if item.id == record.id else item for item in items]

def _remove(items: List, item_id: str) -> List:
    kept = [item for item in items if item.id != item_id]
    return items if len(kept) == len(items) else kept

def _append(items: List, record) -> List:
    if any(item.id == record.id for item in items):
        return items
    return items + [record]

def _with(state: AppState, field: str, items: List) -> AppState:
    if items is getattr(state, field):
        return state
    return state.model_copy(update={field: items})

def _set_state(state: AppState, payload: Any) -> AppState:
    return _as(AppState, payload)

def _update_budget_total(state: AppState, payload: Any) -> AppState:
    budget_total = float(payload)
    if not math.isfinite(budget_total):
        raise ValueError(f"Budget total must be a finite number, got {payload!r}")
    if budget_total == state.budget_total:
        return state
    return state.model_copy(update={"budget_total": budget_total})

def _add_expense(state: AppState, payload: Any) -> AppState:
    return _with(state, "expenses", _append(state.expenses, _as(ExpenseItem, payload)))

def _update_expense(state: AppState, payload: Any) -> AppState:
    return _with(state, "expenses", _replace(state.expenses, _as(ExpenseItem, payload)))

def _delete_expense(state: AppState, payload: Any) -> AppState:
    return _with(state, "expenses", _remove(state.expenses, payload))

def _add_guest(state: AppState, payload: Any) -> AppState:
    return _with(state, "guests", _append(state.guests, _as(Guest, payload)))

def _update_guest(state: AppState, payload: Any) -> AppState:
    return _with(state, "guests", _replace(state.guests, _as(Guest, payload)))

def _bulk_add_guests(state: AppState, payload: Any) -> AppState:
    known = {guest.id for guest in state.guests}
    new_guests = []
    for item in payload or []:
        guest = _as(Guest, item)
        if guest.id not in known:
            known.add(guest.id)
            new_guests.append(guest)
    if not new_guests:
        return state
    return state.model_copy(update={"guests": state.guests + new_guests})

def _delete_guest(state: AppState, payload: Any) -> AppState:
    return _with(state, "guests", _remove(state.guests, payload))

def _toggle_guest_confirm(state: AppState, payload: Any) -> AppState:
    guest = next((g for g in state.guests if g.id == payload), None)
    if guest is None:
        return state
    toggled = guest.model_copy(update={"confirmed": not guest.confirmed})
    return _with(state, "guests", _replace(state.guests, toggled))

def _add_guest_group(state: AppState, payload: Any) -> AppState:
    return _with(state, "guest_groups", _append(state.guest_groups, _as(GuestGroup, payload)))

def _delete_guest_group(state: AppState, payload: Any) -> AppState:
    # Guests keep their group_id and show as ungrouped
    return _with(state, "guest_groups", _remove(state.guest_groups, payload))

_HANDLERS: Dict[ActionType, Callable[[AppState, Any], AppState]] = {
    ActionType.SET_STATE: _set_state,
    ActionType.UPDATE_BUDGET_TOTAL: _update_budget_total,
    ActionType.ADD_EXPENSE: _add_expense,
    ActionType.UPDATE_EXPENSE: _update_expense,
    ActionType.DELETE_EXPENSE: _delete_expense,
    ActionType.ADD_GUEST: _add_guest,
    ActionType.UPDATE_GUEST: _update_guest,
    ActionType.BULK_ADD_GUESTS: _bulk_add_guests,
    ActionType.DELETE_GUEST: _delete_guest,
    ActionType.TOGGLE_GUEST_CONFIRM: _toggle_guest_confirm,
    ActionType.ADD_GUEST_GROUP: _add_guest_group,
    ActionType.DELETE_GUEST_GROUP: _delete_guest_group,
}

def reduce_state(state: AppState, action: Action) -> AppState:
    """Pure reducer: returns ``state`` itself when the action changes nothing"""
    handler = _HANDLERS.get(action.type)
    if handler is None:
        return state
    return handler(state, action.payload)

class HistoryStore:
    """Linear undo/redo history: past frames, the present state, redo frames"""

    def __init__(self, initial_state: AppState):
        self.past: List[AppState] = []
        self.present: AppState = initial_state
        self.future: List[AppState] = []

    @property
    def can_undo(self) -> bool:
        return len(self.past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.future) > 0

    def execute(self, action: Action) -> bool:
        """Apply an action; returns False when it had no effect and no frame was pushed"""
        new_present = reduce_state(self.present, action)
        if new_present is self.present or new_present == self.present:
            logger.debug(f"Ignoring no-op action {action.type.value}")
            return False

        self.past.append(self.present)
        self.present = new_present
        self.future = []
        return True

    def undo(self) -> bool:
        if not self.past:
            return False
        self.future.insert(0, self.present)
        self.present = self.past.pop()
        return True

    def redo(self) -> bool:
        if not self.future:
            return False
        self.past.append(self.present)
        self.present = self.future.pop(0)
        return True

    def load_state(self, state: AppState) -> None:
        """Replace the present; history before a load is not reachable"""
        self.past = []
        self.present = state
        self.future = []
