from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.crud import challenge as challenge_crud
from app.crud import event as event_crud
from app.database import get_db
from app.models.user import User
from app.schemas.challenge import ChallengeResponse
from app.schemas.event import (
    EventCreate,
    EventEntryResponse,
    EventFeesResponse,
    EventRegistrationResponse,
    EventResponse,
    EventStatusUpdate,
)
from app.services import events as event_service
from app.services import ledger
from app.services.auth import get_current_user

router = APIRouter()


@router.post("/", response_model=EventResponse)
def create_event(
    event: EventCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return event_service.create_event(db, current_user, event)


@router.get("/", response_model=List[EventResponse])
def read_club_events(
    club_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return event_service.list_club_events(db, current_user, club_id)


@router.get("/{event_id}", response_model=EventResponse)
def read_event(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return event_service.get_event_for_reader(db, current_user, event_id)


@router.get("/{event_id}/challenges", response_model=List[ChallengeResponse])
def read_event_challenges(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    event_service.get_event_for_reader(db, current_user, event_id)
    return challenge_crud.get_challenges_by_event(db, event_id)


@router.put("/{event_id}/status", response_model=EventResponse)
def update_event_status(
    event_id: int,
    payload: EventStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return event_service.transition_event(db, current_user, event_id, payload.status)


@router.post("/{event_id}/register", response_model=EventRegistrationResponse)
def register_for_event(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = ledger.register_event_entry(db, current_user, event_id)
    return EventRegistrationResponse(
        entry=EventEntryResponse.model_validate(entry),
        payment_required=entry.payment_reference is not None,
    )


@router.get("/{event_id}/fees", response_model=EventFeesResponse)
def read_event_fees(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    event = event_service.get_event_for_reader(db, current_user, event_id)
    return EventFeesResponse(
        event_id=event.id,
        entry_count=event_crud.count_event_entries(db, event.id),
        entry_fee_usd=event.entry_fee_usd,
        total_fees_usd=ledger.aggregate_event_fees(db, event),
    )
