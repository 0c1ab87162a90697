"""
Event API routes - persistence side of the sync contract, requires authentication
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.models import Event
from app.schemas.event import EventCreate, EventResponse
from app.schemas.sync import DeltaChanges, FullSyncPayload
from app.services.import_service import ImportFormatError, ImportService
from app.services.report_service import ReportService
from app.services.repositories import EventRepo
from app.services.social_tree import SocialTreeService
from app.utils.responses import success_response, error_response, not_found_error
from app.utils.security import verify_admin_token

logger = logging.getLogger(__name__)

router = APIRouter()

def _get_event_or_404(db: Session, event_id: str) -> Event:
    event = EventRepo.get_by_id(db, event_id)
    if not event:
        not_found_error("Event")
    return event

def _event_data(event: Event) -> Dict[str, Any]:
    return EventResponse.model_validate(event).model_dump(mode="json")

@router.post("/events")
async def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Create a new event seeded with the default groups and expenses"""
    event = EventRepo.create(
        db,
        name=event_data.name,
        event_date=event_data.event_date,
        budget_total=event_data.budget_total,
        description=event_data.description,
    )
    state = EventRepo.get_state(db, event.id)

    return success_response(
        message="Event created successfully",
        data={**_event_data(event), "state": state.to_payload()},
        status_code=201
    )

@router.get("/events")
async def list_events(
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """List all events"""
    events = EventRepo.list_all(db)
    return success_response(
        message="Events retrieved successfully",
        data=[_event_data(event) for event in events]
    )

@router.get("/events/{event_id}/state")
async def get_event_state(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Load the stored state used to seed an editing session"""
    event = _get_event_or_404(db, event_id)
    state = EventRepo.get_state(db, event.id)
    return success_response(
        message="Event state retrieved",
        data=state.to_payload()
    )

@router.put("/events/{event_id}/sync")
async def sync_full(
    event_id: str,
    payload: FullSyncPayload,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Replace all event data with the given state"""
    event = _get_event_or_404(db, event_id)
    EventRepo.save_full(db, event, payload)
    return success_response(
        message="Event data saved",
        data={"strategy": "full", "savedAt": event.updated_at.isoformat()}
    )

@router.post("/events/{event_id}/sync-delta")
async def sync_delta(
    event_id: str,
    payload: DeltaChanges,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Apply only the created, updated and deleted records"""
    event = _get_event_or_404(db, event_id)
    EventRepo.apply_delta(db, event, payload)
    return success_response(
        message="Event changes saved",
        data={"strategy": "delta", "changes": payload.total_changes(), "savedAt": event.updated_at.isoformat()}
    )

@router.post("/events/{event_id}/import")
async def import_backup(
    event_id: str,
    data: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Replace event data with an imported backup"""
    event = _get_event_or_404(db, event_id)

    try:
        state = ImportService.import_data(data)
    except ImportFormatError as e:
        return error_response(
            message="Invalid backup file",
            details=str(e),
            status_code=422
        )

    EventRepo.save_full(db, event, FullSyncPayload.from_state(state))
    return success_response(
        message=f"Backup imported successfully. {len(state.guests)} guests imported.",
        data=state.to_payload()
    )

@router.get("/events/{event_id}/export.json")
async def export_backup(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Export an id-less backup that can be imported into any event"""
    event = _get_event_or_404(db, event_id)
    state = EventRepo.get_state(db, event.id)
    return success_response(
        message="Backup exported",
        data=ImportService.export_portable(state)
    )

@router.get("/events/{event_id}/export.xlsx")
async def export_workbook(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Export the social tree and budget as an Excel workbook"""
    event = _get_event_or_404(db, event_id)
    state = EventRepo.get_state(db, event.id)
    excel_content = ReportService.export_workbook(state, event_name=event.name)

    return Response(
        content=excel_content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=event_{event.id}.xlsx"}
    )

@router.get("/events/{event_id}/social-tree")
async def get_social_tree(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Social tree rows, the per-root hierarchy and the top influencers"""
    event = _get_event_or_404(db, event_id)
    state = EventRepo.get_state(db, event.id)
    tree = SocialTreeService.build(state.guests)

    return success_response(
        message="Social tree retrieved",
        data={
            "guests": json.loads(ReportService.social_tree_frame(state, tree).to_json(orient="records")),
            "hierarchy": json.loads(ReportService.hierarchy_frame(state, tree).to_json(orient="records")),
            "influencers": json.loads(ReportService.influencers_frame(state, tree).to_json(orient="records")),
        }
    )

@router.get("/events/{event_id}/budget")
async def get_budget_summary(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Budget totals for the event"""
    event = _get_event_or_404(db, event_id)
    state = EventRepo.get_state(db, event.id)
    return success_response(
        message="Budget summary retrieved",
        data=ReportService.budget_summary(state).model_dump()
    )

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Delete an event and all of its data"""
    event = _get_event_or_404(db, event_id)
    EventRepo.delete(db, event)
    logger.info(f"Deleted event {event_id}")

    return success_response(
        message="Event deleted successfully",
        data={"deleted_event_id": event_id}
    )
