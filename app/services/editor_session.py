"""
Editing session for one event: undo/redo history plus the sync baseline
"""

from typing import Optional

from app.schemas.actions import Action
from app.schemas.state import AppState
from app.schemas.sync import DeltaChanges, SyncStrategy
from app.services.delta_engine import DeltaEngine, choose_sync_strategy
from app.services.history_store import HistoryStore

class EditorSession:
    """Owns the state of a single event; create one per event being edited"""

    def __init__(self, initial_state: AppState):
        self.history = HistoryStore(initial_state)
        self.delta_engine = DeltaEngine(initial_state)

    @property
    def state(self) -> AppState:
        return self.history.present

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def execute(self, action: Action) -> bool:
        return self.history.execute(action)

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    def load_state(self, state: AppState) -> None:
        """Start over from a loaded or imported state; it becomes the baseline"""
        self.history.load_state(state)
        self.delta_engine.reset(state)

    def get_deltas(self) -> DeltaChanges:
        return self.delta_engine.get_deltas(self.state)

    def has_pending_changes(self) -> bool:
        return self.delta_engine.has_pending_changes(self.state)

    def mark_as_synced(self, snapshot: Optional[AppState] = None) -> None:
        """Record that ``snapshot`` (default: the present) is durably persisted.

        Only call after the persistence side confirmed the write.
        """
        self.delta_engine.reset(snapshot if snapshot is not None else self.state)

    def sync_strategy(self, deltas: Optional[DeltaChanges] = None) -> SyncStrategy:
        if deltas is None:
            deltas = self.get_deltas()
        return choose_sync_strategy(deltas.total_changes(), self.state.total_items())
