"""
Delta computation between the last persisted baseline and the current state
"""

import logging
from typing import Dict, List, Set, Tuple

from app.core.config import settings
from app.schemas.state import AppState
from app.schemas.sync import DeltaChanges, ExpenseDelta, GuestDelta, GuestGroupDelta, SyncStrategy
from app.utils.canonical import canonical_equal

logger = logging.getLogger(__name__)

COLLECTIONS = ("guests", "guest_groups", "expenses")

def choose_sync_strategy(
    total_changes: int,
    total_items: int,
    threshold: float = None
) -> SyncStrategy:
    """Delta transfer while changes stay under ``threshold`` of all items.

    Past that point (bulk imports, mass edits) a full rewrite is cheaper for
    the persistence side than many small statements.
    """
    if threshold is None:
        threshold = settings.DELTA_SYNC_THRESHOLD
    if total_changes < total_items * threshold:
        return SyncStrategy.DELTA
    return SyncStrategy.FULL

def _diff_collection(baseline_items: List, baseline_ids: Set[str], present_items: List) -> Tuple[List, List, List[str]]:
    baseline_by_id = {item.id: item for item in baseline_items}
    created = []
    updated = []
    present_ids = set()

    for item in present_items:
        present_ids.add(item.id)
        if item.id not in baseline_ids:
            created.append(item)
        elif not canonical_equal(item, baseline_by_id.get(item.id)):
            updated.append(item)

    deleted = [item.id for item in baseline_items if item.id in baseline_ids and item.id not in present_ids]
    return created, updated, deleted

class DeltaEngine:
    """Remembers the last persisted state and diffs later states against it"""

    def __init__(self, baseline: AppState):
        self.reset(baseline)

    def reset(self, baseline: AppState) -> None:
        """Advance the baseline; called on load and after a confirmed write"""
        self.baseline = baseline
        self.baseline_ids: Dict[str, Set[str]] = {
            name: {item.id for item in getattr(baseline, name)}
            for name in COLLECTIONS
        }
        logger.debug(
            f"Baseline reset: {len(baseline.guests)} guests, "
            f"{len(baseline.guest_groups)} groups, {len(baseline.expenses)} expenses"
        )

    def get_deltas(self, present: AppState) -> DeltaChanges:
        results = {}
        for name in COLLECTIONS:
            results[name] = _diff_collection(
                getattr(self.baseline, name),
                self.baseline_ids[name],
                getattr(present, name),
            )

        guests = results["guests"]
        groups = results["guest_groups"]
        expenses = results["expenses"]

        budget_total = None
        if present.budget_total != self.baseline.budget_total:
            budget_total = present.budget_total

        return DeltaChanges(
            budget_total=budget_total,
            guests=GuestDelta(created=guests[0], updated=guests[1], deleted=guests[2]),
            guest_groups=GuestGroupDelta(created=groups[0], updated=groups[1], deleted=groups[2]),
            expenses=ExpenseDelta(created=expenses[0], updated=expenses[1], deleted=expenses[2]),
        )

    def has_pending_changes(self, present: AppState) -> bool:
        return not self.get_deltas(present).is_empty()
