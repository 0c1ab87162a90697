"""
Sync driver: sends pending changes to the persistence side, then advances the baseline
"""

import logging
from typing import Protocol

from app.schemas.sync import DeltaChanges, FullSyncPayload, SyncResult, SyncStrategy
from app.services.delta_engine import choose_sync_strategy
from app.services.editor_session import EditorSession

logger = logging.getLogger(__name__)

class SyncError(RuntimeError):
    """The persistence side rejected or failed a write; the baseline is unchanged"""

class PersistenceBackend(Protocol):
    """Persistence collaborator; each call returns True once the write is durable"""

    async def save_full(self, payload: FullSyncPayload) -> bool:
        ...

    async def save_delta(self, payload: DeltaChanges) -> bool:
        ...

class SyncService:
    """Pushes an editor session's pending changes through a persistence backend"""

    def __init__(self, backend: PersistenceBackend):
        self.backend = backend

    async def sync(self, session: EditorSession, force_full: bool = False) -> SyncResult:
        """Persist what changed since the last successful sync.

        The delta and the state snapshot are captured before the write is
        awaited; edits made while it is in flight stay pending for the next
        call. On failure ``SyncError`` is raised and nothing is marked synced.
        """
        deltas = session.get_deltas()
        snapshot = session.state
        total_changes = deltas.total_changes()
        total_items = snapshot.total_items()

        if deltas.is_empty() and not force_full:
            return SyncResult(skipped=True, total_items=total_items)

        if force_full:
            strategy = SyncStrategy.FULL
        else:
            strategy = choose_sync_strategy(total_changes, total_items)

        try:
            if strategy == SyncStrategy.DELTA:
                saved = await self.backend.save_delta(deltas)
            else:
                saved = await self.backend.save_full(FullSyncPayload.from_state(snapshot))
        except Exception as e:
            logger.error(f"{strategy.value} sync failed: {e}")
            raise SyncError(f"Sync failed: {e}") from e

        if not saved:
            logger.error(f"{strategy.value} sync rejected by persistence backend")
            raise SyncError("Sync rejected by persistence backend")

        session.mark_as_synced(snapshot)
        logger.info(f"{strategy.value} sync complete: {total_changes} changes, {total_items} items")

        return SyncResult(
            strategy=strategy,
            total_changes=total_changes,
            total_items=total_items,
        )
