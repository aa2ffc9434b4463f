from sqlalchemy import and_
from sqlalchemy.orm import Session
from typing import List, Optional

from app.models.event import Event
from app.models.event_entry import EventEntry


def get_event(db: Session, event_id: int) -> Optional[Event]:
    return db.query(Event).filter(Event.id == event_id).first()


def get_events_by_club(db: Session, club_id: int) -> List[Event]:
    return (
        db.query(Event)
        .filter(Event.club_id == club_id)
        .order_by(Event.created_at.desc())
        .all()
    )


def get_event_entry(db: Session, event_id: int, user_id: int) -> Optional[EventEntry]:
    return (
        db.query(EventEntry)
        .filter(and_(EventEntry.event_id == event_id, EventEntry.user_id == user_id))
        .first()
    )


def count_event_entries(db: Session, event_id: int) -> int:
    return db.query(EventEntry).filter(EventEntry.event_id == event_id).count()


def get_event_for_update(db: Session, event_id: int) -> Optional[Event]:
    """Bloquea la fila del evento para serializar inscripciones con cupo"""
    return (
        db.query(Event).filter(Event.id == event_id).with_for_update().first()
    )
