"""
Repository layer: loads event state and applies full or delta sync payloads
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.defaults import generate_initial_state, new_id
from app.models import Event, Expense, Guest, GuestGroup
from app.schemas.state import AppState, ExpenseItem
from app.schemas.state import Guest as GuestRecord
from app.schemas.state import GuestGroup as GuestGroupRecord
from app.schemas.sync import DeltaChanges, FullSyncPayload

logger = logging.getLogger(__name__)


# -------- Row conversion --------

def _guest_row(event_id: str, guest: GuestRecord) -> Guest:
    return Guest(
        id=guest.id,
        event_id=event_id,
        name=guest.name,
        group_id=guest.group_id or None,
        parent_id=guest.parent_id or None,
        confirmed=guest.confirmed,
        priority=guest.priority,
        photo_url=guest.photo_url,
        is_root=guest.is_root,
        updated_at=datetime.utcnow(),
    )

def _group_row(event_id: str, group: GuestGroupRecord) -> GuestGroup:
    return GuestGroup(id=group.id, event_id=event_id, name=group.name, color=group.color)

def _expense_row(event_id: str, expense: ExpenseItem) -> Expense:
    return Expense(
        id=expense.id,
        event_id=event_id,
        category=expense.category,
        supplier=expense.supplier or None,
        estimated_value=expense.estimated_value,
        actual_value=expense.actual_value,
        is_contracted=expense.is_contracted,
        include=expense.include,
        updated_at=datetime.utcnow(),
    )

def _guest_record(row: Guest) -> GuestRecord:
    return GuestRecord(
        id=row.id,
        name=row.name,
        group_id=row.group_id,
        confirmed=bool(row.confirmed),
        parent_id=row.parent_id,
        priority=row.priority or 3,
        photo_url=row.photo_url,
        is_root=row.is_root,
    )

def _group_record(row: GuestGroup) -> GuestGroupRecord:
    return GuestGroupRecord(id=row.id, name=row.name, color=row.color)

def _expense_record(row: Expense) -> ExpenseItem:
    return ExpenseItem(
        id=row.id,
        category=row.category,
        supplier=row.supplier or "",
        estimated_value=float(row.estimated_value or 0),
        actual_value=float(row.actual_value or 0),
        is_contracted=bool(row.is_contracted),
        include=bool(row.include),
    )


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def get_by_id(db: Session, event_id: str) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def list_all(db: Session) -> List[Event]:
        return db.query(Event).order_by(Event.created_at.desc()).all()

    @staticmethod
    def create(
        db: Session,
        name: str,
        event_date: Optional[date] = None,
        budget_total: Optional[float] = None,
        description: Optional[str] = None,
    ) -> Event:
        """Create an event seeded with the default groups and expense categories"""
        template = generate_initial_state(budget_total)
        event = Event(
            id=new_id(),
            name=name,
            event_date=event_date,
            budget_total=template.budget_total,
            description=description,
        )
        db.add(event)
        db.flush()

        db.add_all([_group_row(event.id, g) for g in template.guest_groups])
        db.add_all([_expense_row(event.id, e) for e in template.expenses])
        db.commit()
        db.refresh(event)

        logger.info(f"Created event {event.id} ({event.name})")
        return event

    @staticmethod
    def delete(db: Session, event: Event) -> None:
        db.delete(event)
        db.commit()

    @staticmethod
    def get_state(db: Session, event_id: str) -> Optional[AppState]:
        """Stored state for the event, or None when the event does not exist"""
        event = EventRepo.get_by_id(db, event_id)
        if not event:
            return None

        groups = db.query(GuestGroup).filter(GuestGroup.event_id == event_id).order_by(GuestGroup.name).all()
        guests = db.query(Guest).filter(Guest.event_id == event_id).order_by(Guest.name).all()
        expenses = db.query(Expense).filter(Expense.event_id == event_id).order_by(Expense.category).all()

        return AppState(
            budget_total=float(event.budget_total or 0),
            guest_groups=[_group_record(g) for g in groups],
            guests=[_guest_record(g) for g in guests],
            expenses=[_expense_record(e) for e in expenses],
        )

    @staticmethod
    def save_full(db: Session, event: Event, payload: FullSyncPayload) -> None:
        """Replace every group, guest and expense of the event in one transaction"""
        try:
            event.budget_total = payload.budget_total
            event.updated_at = datetime.utcnow()

            db.query(Guest).filter(Guest.event_id == event.id).delete()
            db.query(GuestGroup).filter(GuestGroup.event_id == event.id).delete()
            db.query(Expense).filter(Expense.event_id == event.id).delete()
            db.flush()

            db.add_all([_group_row(event.id, g) for g in payload.guest_groups])
            db.add_all([_expense_row(event.id, e) for e in payload.expenses])
            db.add_all([_guest_row(event.id, g) for g in payload.guests])
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(
            f"Full sync for event {event.id}: {len(payload.guests)} guests, "
            f"{len(payload.guest_groups)} groups, {len(payload.expenses)} expenses"
        )

    @staticmethod
    def apply_delta(db: Session, event: Event, delta: DeltaChanges) -> None:
        """Apply deletes, then creates, then updates in one transaction.

        Creates and updates are upserts, so resending an already applied delta
        is harmless.
        """
        try:
            if delta.budget_total is not None:
                event.budget_total = delta.budget_total
                event.updated_at = datetime.utcnow()

            if delta.guests.deleted:
                db.query(Guest).filter(
                    Guest.event_id == event.id,
                    Guest.id.in_(delta.guests.deleted)
                ).delete(synchronize_session=False)
            if delta.guest_groups.deleted:
                db.query(GuestGroup).filter(
                    GuestGroup.event_id == event.id,
                    GuestGroup.id.in_(delta.guest_groups.deleted)
                ).delete(synchronize_session=False)
            if delta.expenses.deleted:
                db.query(Expense).filter(
                    Expense.event_id == event.id,
                    Expense.id.in_(delta.expenses.deleted)
                ).delete(synchronize_session=False)

            # Groups before the guests that reference them
            for group in delta.guest_groups.created + delta.guest_groups.updated:
                db.merge(_group_row(event.id, group))
            for expense in delta.expenses.created + delta.expenses.updated:
                db.merge(_expense_row(event.id, expense))
            for guest in delta.guests.created + delta.guests.updated:
                db.merge(_guest_row(event.id, guest))

            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Delta sync for event {event.id}: {delta.total_changes()} changes")


# -------- Persistence backend --------

class RepositoryBackend:
    """Persistence collaborator writing straight to the database"""

    def __init__(self, db: Session, event_id: str):
        self.db = db
        self.event_id = event_id

    async def save_full(self, payload: FullSyncPayload) -> bool:
        event = EventRepo.get_by_id(self.db, self.event_id)
        if not event:
            return False
        EventRepo.save_full(self.db, event, payload)
        return True

    async def save_delta(self, payload: DeltaChanges) -> bool:
        event = EventRepo.get_by_id(self.db, self.event_id)
        if not event:
            return False
        EventRepo.apply_delta(self.db, event, payload)
        return True
