"""
Tests for the history reducer and undo/redo store
"""

import pytest
from pydantic import ValidationError

from app.schemas.actions import Action, ActionType
from app.schemas.state import AppState, ExpenseItem, Guest, GuestGroup
from app.services.history_store import HistoryStore, reduce_state

@pytest.fixture
def base_state():
    """Small event: one group, one guest, one expense"""
    return AppState(
        budget_total=1000,
        guest_groups=[GuestGroup(id="g1", name="Friends", color="#0ea5e9")],
        guests=[Guest(id="1", name="Ana", group_id="g1")],
        expenses=[ExpenseItem(id="e1", category="Cake", estimated_value=300)],
    )

@pytest.fixture
def store(base_state):
    return HistoryStore(base_state)

def add_guest(guest_id, name, **fields):
    return Action(type=ActionType.ADD_GUEST, payload=Guest(id=guest_id, name=name, **fields))

def test_execute_pushes_frame(store, base_state):
    """Test a state-changing action moves the old present to the past"""
    assert store.execute(add_guest("2", "Bruno"))

    assert store.past == [base_state]
    assert [g.name for g in store.present.guests] == ["Ana", "Bruno"]
    assert store.can_undo
    assert not store.can_redo

def test_undo_redo_round_trip(store, base_state):
    """Test undoing everything restores the start and redoing replays it"""
    actions = [
        add_guest("2", "Bruno", parent_id="1"),
        Action(type=ActionType.TOGGLE_GUEST_CONFIRM, payload="1"),
        Action(type=ActionType.UPDATE_BUDGET_TOTAL, payload=2500),
        Action(type=ActionType.DELETE_EXPENSE, payload="e1"),
    ]
    for action in actions:
        assert store.execute(action)
    final_state = store.present

    while store.undo():
        pass
    assert store.present == base_state
    assert len(store.future) == len(actions)

    while store.redo():
        pass
    assert store.present == final_state
    assert store.past[0] == base_state

def test_new_action_discards_redo(store):
    """Test executing after an undo drops the redo frames"""
    store.execute(add_guest("2", "Bruno"))
    store.execute(add_guest("3", "Caio"))
    store.undo()
    assert store.can_redo

    store.execute(add_guest("4", "Duda"))

    assert not store.can_redo
    assert not store.redo()
    assert [g.id for g in store.present.guests] == ["1", "2", "4"]

def test_undo_and_redo_on_empty_stacks(store, base_state):
    """Test undo/redo with nothing to move"""
    assert not store.undo()
    assert not store.redo()
    assert store.present == base_state

def test_noop_actions_do_not_push_frames(store, base_state):
    """Test actions that change nothing leave the history untouched"""
    noops = [
        Action(type=ActionType.DELETE_GUEST, payload="missing"),
        Action(type=ActionType.UPDATE_GUEST, payload=Guest(id="missing", name="Ghost")),
        Action(type=ActionType.TOGGLE_GUEST_CONFIRM, payload="missing"),
        Action(type=ActionType.DELETE_EXPENSE, payload="missing"),
        Action(type=ActionType.DELETE_GUEST_GROUP, payload="missing"),
        Action(type=ActionType.UPDATE_BUDGET_TOTAL, payload=1000),
        Action(type=ActionType.SET_STATE, payload=base_state),
        Action(type=ActionType.BULK_ADD_GUESTS, payload=[]),
    ]
    for action in noops:
        assert not store.execute(action)

    assert store.past == []
    assert store.present is base_state

def test_update_with_identical_record_is_noop(store):
    """Test replacing a guest with an equal record pushes no frame"""
    assert not store.execute(Action(type=ActionType.UPDATE_GUEST, payload=Guest(id="1", name="Ana", group_id="g1")))
    assert store.past == []

def test_adding_existing_id_is_noop(store):
    """Test ids stay unique within a collection"""
    assert not store.execute(add_guest("1", "Another Ana"))
    assert not store.execute(Action(type=ActionType.ADD_GUEST_GROUP, payload=GuestGroup(id="g1", name="Dup")))
    assert [g.name for g in store.present.guests] == ["Ana"]

def test_toggle_confirm_twice(store, base_state):
    """Test toggling flips the flag and toggling again restores it"""
    store.execute(Action(type=ActionType.TOGGLE_GUEST_CONFIRM, payload="1"))
    assert store.present.guests[0].confirmed

    store.execute(Action(type=ActionType.TOGGLE_GUEST_CONFIRM, payload="1"))
    assert store.present == base_state
    assert len(store.past) == 2

def test_bulk_add_skips_known_ids(store):
    """Test bulk add appends in order and ignores ids already present"""
    payload = [
        Guest(id="1", name="Duplicate"),
        Guest(id="2", name="Bruno"),
        Guest(id="3", name="Caio"),
        Guest(id="2", name="Bruno again"),
    ]
    assert store.execute(Action(type=ActionType.BULK_ADD_GUESTS, payload=payload))
    assert [(g.id, g.name) for g in store.present.guests] == [("1", "Ana"), ("2", "Bruno"), ("3", "Caio")]

def test_delete_group_keeps_guest_references(store):
    """Test deleting a group does not touch guests pointing at it"""
    store.execute(Action(type=ActionType.DELETE_GUEST_GROUP, payload="g1"))

    assert store.present.guest_groups == []
    assert store.present.guests[0].group_id == "g1"

def test_delete_guest_keeps_children_parent_ids(store):
    """Test children of a deleted guest keep a dangling parent id"""
    store.execute(add_guest("2", "Bruno", parent_id="1"))
    store.execute(Action(type=ActionType.DELETE_GUEST, payload="1"))

    assert [g.id for g in store.present.guests] == ["2"]
    assert store.present.guests[0].parent_id == "1"

def test_expense_actions(store):
    """Test add and update of expense lines"""
    store.execute(Action(type=ActionType.ADD_EXPENSE, payload=ExpenseItem(id="e2", category="Band/DJ")))
    store.execute(Action(
        type=ActionType.UPDATE_EXPENSE,
        payload=ExpenseItem(id="e1", category="Cake", estimated_value=300, actual_value=280, is_contracted=True),
    ))

    expenses = {e.id: e for e in store.present.expenses}
    assert set(expenses) == {"e1", "e2"}
    assert expenses["e1"].is_contracted
    assert expenses["e1"].actual_value == 280

def test_payloads_accept_camel_case_dicts(store):
    """Test records coming in as plain camelCase dicts"""
    store.execute(Action(type=ActionType.ADD_GUEST, payload={"id": "2", "name": "Bruno", "parentId": "1", "groupId": "g1"}))
    store.execute(Action(type=ActionType.SET_STATE, payload={
        **store.present.to_payload(),
        "budgetTotal": 4200,
    }))

    assert store.present.budget_total == 4200
    assert store.present.guests[1].parent_id == "1"
    assert len(store.past) == 2

def test_reducer_does_not_mutate_input(base_state):
    """Test reducing leaves the previous state intact"""
    snapshot = base_state.model_copy(deep=True)
    new_state = reduce_state(base_state, add_guest("2", "Bruno"))

    assert new_state is not base_state
    assert base_state == snapshot
    assert len(base_state.guests) == 1

def test_reducer_returns_same_state_for_noop(base_state):
    """Test identity is preserved when nothing changes"""
    assert reduce_state(base_state, Action(type=ActionType.DELETE_GUEST, payload="missing")) is base_state

def test_load_state_clears_history(store):
    """Test loading replaces the present and drops both stacks"""
    store.execute(add_guest("2", "Bruno"))
    store.execute(add_guest("3", "Caio"))
    store.undo()

    loaded = AppState(budget_total=10)
    store.load_state(loaded)

    assert store.present is loaded
    assert not store.can_undo
    assert not store.can_redo

@pytest.mark.parametrize("value", ["NaN", "Infinity", float("nan"), float("-inf")])
def test_non_finite_expense_values_are_rejected(store, base_state, value):
    """Test NaN and Infinity never reach the present state"""
    action = Action(
        type=ActionType.UPDATE_EXPENSE,
        payload={"id": "e1", "category": "Cake", "estimatedValue": value},
    )
    with pytest.raises(ValidationError):
        store.execute(action)

    assert store.present is base_state
    assert store.past == []

@pytest.mark.parametrize("value", [float("nan"), float("inf"), "Infinity"])
def test_non_finite_budget_is_rejected(store, base_state, value):
    """Test the budget total must stay a finite number"""
    with pytest.raises(ValueError):
        store.execute(Action(type=ActionType.UPDATE_BUDGET_TOTAL, payload=value))

    assert store.present is base_state

def test_records_refuse_non_finite_numbers():
    """Test the record schemas themselves"""
    with pytest.raises(ValidationError):
        ExpenseItem(id="e9", category="Cake", actual_value=float("inf"))
    with pytest.raises(ValidationError):
        AppState.model_validate({"budgetTotal": "NaN"})
