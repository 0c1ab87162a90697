"""
Import/export of the portable backup format (names instead of ids)
"""

import logging
from datetime import datetime
from typing import Any, Dict

from pydantic import ValidationError

from app.core.config import settings
from app.core.defaults import generate_initial_groups, new_id
from app.schemas.portable import PortableState
from app.schemas.state import AppState, ExpenseItem, Guest, GuestGroup

logger = logging.getLogger(__name__)

class ImportFormatError(ValueError):
    """The uploaded data is not a recognisable backup"""

class ImportService:
    """Translates backups into AppState with fresh ids, and back"""

    @staticmethod
    def import_data(data: Any) -> AppState:
        """Accept either a portable backup or a raw AppState dump"""
        if not isinstance(data, dict) or not isinstance(data.get("guests", []), list):
            raise ImportFormatError("Backup must be an object with a list of guests")

        carries_ids = any(isinstance(g, dict) and g.get("id") for g in data.get("guests", []))
        try:
            if carries_ids:
                return ImportService.import_raw_state(data)
            return ImportService.import_portable(PortableState.model_validate(data))
        except ValidationError as e:
            raise ImportFormatError(f"Invalid backup: {e.error_count()} validation errors") from e

    @staticmethod
    def import_raw_state(data: Dict[str, Any]) -> AppState:
        """Take an AppState dump, giving every record a fresh id.

        Group and parent references are rewritten through the new ids; ones
        that pointed outside the dump are dropped.
        """
        data = dict(data)
        if not data.get("guestGroups") and not data.get("guest_groups"):
            data["guestGroups"] = [g.to_payload() for g in generate_initial_groups()]
        if data.get("budgetTotal") is None and data.get("budget_total") is None:
            data["budgetTotal"] = settings.DEFAULT_BUDGET_TOTAL
        state = AppState.model_validate(data)

        group_ids: Dict[str, str] = {}
        for group in state.guest_groups:
            group_ids.setdefault(group.id, new_id())
        guest_ids: Dict[str, str] = {}
        for guest in state.guests:
            guest_ids.setdefault(guest.id, new_id())

        # Duplicate ids in the dump keep only their first record
        groups = []
        seen = set()
        for group in state.guest_groups:
            if group.id in seen:
                continue
            seen.add(group.id)
            groups.append(group.model_copy(update={"id": group_ids[group.id]}))

        guests = []
        seen = set()
        for guest in state.guests:
            if guest.id in seen:
                continue
            seen.add(guest.id)
            guests.append(guest.model_copy(update={
                "id": guest_ids[guest.id],
                "group_id": group_ids.get(guest.group_id) if guest.group_id else None,
                "parent_id": guest_ids.get(guest.parent_id) if guest.parent_id else None,
            }))

        expenses = [e.model_copy(update={"id": new_id()}) for e in state.expenses]

        logger.info(f"Imported raw backup: {len(guests)} guests, {len(groups)} groups, {len(expenses)} expenses")
        return state.model_copy(update={
            "guest_groups": groups,
            "guests": guests,
            "expenses": expenses,
        })

    @staticmethod
    def import_portable(portable: PortableState) -> AppState:
        """Resolve group and parent names to freshly generated ids.

        Unknown groups fall back to the first group, unknown parents leave the
        guest without a parent. Duplicate names resolve to the first match.
        """
        if portable.guest_groups:
            groups = [GuestGroup(id=new_id(), name=g.name, color=g.color) for g in portable.guest_groups]
        else:
            groups = generate_initial_groups()

        group_id_by_name: Dict[str, str] = {}
        for group in groups:
            group_id_by_name.setdefault(group.name, group.id)
        fallback_group_id = groups[0].id if groups else None

        guest_ids = [new_id() for _ in portable.guests]
        guest_id_by_name: Dict[str, str] = {}
        for guest_id, item in zip(guest_ids, portable.guests):
            guest_id_by_name.setdefault(item.name, guest_id)

        guests = []
        unresolved_parents = 0
        for guest_id, item in zip(guest_ids, portable.guests):
            parent_id = None
            if item.parent_name:
                parent_id = guest_id_by_name.get(item.parent_name)
                if parent_id is None or parent_id == guest_id:
                    unresolved_parents += 1
                    parent_id = None

            guests.append(Guest(
                id=guest_id,
                name=item.name,
                group_id=group_id_by_name.get(item.group_name or "", fallback_group_id),
                confirmed=item.confirmed,
                parent_id=parent_id,
                priority=item.priority,
                photo_url=item.photo_url,
                is_root=item.is_root,
            ))

        expenses = [
            ExpenseItem(
                id=new_id(),
                category=e.category,
                supplier=e.supplier or "",
                estimated_value=e.estimated_value,
                actual_value=e.actual_value,
                is_contracted=e.is_contracted,
                include=e.include,
            )
            for e in portable.expenses
        ]

        budget_total = portable.budget_total
        if budget_total is None:
            budget_total = settings.DEFAULT_BUDGET_TOTAL

        if unresolved_parents:
            logger.warning(f"Import: {unresolved_parents} parent references could not be resolved")
        logger.info(f"Imported {len(guests)} guests, {len(groups)} groups, {len(expenses)} expenses")

        return AppState(
            budget_total=budget_total,
            guest_groups=groups,
            guests=guests,
            expenses=expenses,
        )

    @staticmethod
    def export_portable(state: AppState) -> Dict[str, Any]:
        """Id-less backup that can be re-imported into any event"""
        group_by_id = {g.id: g for g in state.guest_groups}
        guest_by_id = {g.id: g for g in state.guests}

        guests = []
        for guest in state.guests:
            group = group_by_id.get(guest.group_id) if guest.group_id else None
            parent = guest_by_id.get(guest.parent_id) if guest.parent_id else None
            guests.append({
                "name": guest.name,
                "groupName": group.name if group else "",
                "confirmed": guest.confirmed,
                "parentName": parent.name if parent else None,
                "priority": guest.priority or 3,
                "photoUrl": guest.photo_url or None,
                "isRoot": guest.is_root,
            })

        return {
            "budgetTotal": state.budget_total,
            "guestGroups": [{"name": g.name, "color": g.color} for g in state.guest_groups],
            "guests": guests,
            "expenses": [
                {
                    "category": e.category,
                    "supplier": e.supplier,
                    "estimatedValue": e.estimated_value,
                    "actualValue": e.actual_value,
                    "isContracted": e.is_contracted,
                    "include": e.include,
                }
                for e in state.expenses
            ],
            "exportedAt": datetime.utcnow().isoformat(),
        }
