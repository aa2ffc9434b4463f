import logging
from typing import List

from sqlalchemy.orm import Session

from app.crud import challenge as challenge_crud
from app.crud import event as event_crud
from app.enums.permissions import ClubPermission
from app.models.challenge import Challenge, ChallengeStatus
from app.models.event import Event, EventStatus
from app.models.user import User
from app.schemas.challenge import ChallengeCreate
from app.schemas.event import EventCreate
from app.services.access import (
    get_club_or_404,
    require_club_access,
    require_club_permission,
)
from app.services.errors import InvalidStateError, NotFoundError

logger = logging.getLogger(__name__)

# Orden de avance de un evento; CANCELLED se maneja aparte
EVENT_STATUS_ORDER = {
    EventStatus.DRAFT: 0,
    EventStatus.PUBLISHED: 1,
    EventStatus.ONGOING: 2,
    EventStatus.COMPLETED: 3,
}

# COMPLETED sólo se alcanza liquidando el challenge (ver services.settlement)
CHALLENGE_TRANSITIONS = {
    ChallengeStatus.PENDING: {ChallengeStatus.ACTIVE, ChallengeStatus.CANCELLED},
    ChallengeStatus.ACTIVE: {ChallengeStatus.CANCELLED},
    ChallengeStatus.COMPLETED: set(),
    ChallengeStatus.CANCELLED: set(),
}


def get_event_or_404(db: Session, event_id: int) -> Event:
    event = event_crud.get_event(db, event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event


def get_challenge_or_404(db: Session, challenge_id: int) -> Challenge:
    challenge = challenge_crud.get_challenge(db, challenge_id)
    if not challenge:
        raise NotFoundError("Challenge not found")
    return challenge


def list_club_events(db: Session, user: User, club_id: int) -> List[Event]:
    club = get_club_or_404(db, club_id)
    require_club_access(db, user, club)
    return event_crud.get_events_by_club(db, club_id)


def get_event_for_reader(db: Session, user: User, event_id: int) -> Event:
    """Los eventos de un club privado sólo los ven sus miembros"""
    event = get_event_or_404(db, event_id)
    require_club_access(db, user, event.club, "This event is in a private club")
    return event


def get_challenge_for_reader(db: Session, user: User, challenge_id: int) -> Challenge:
    challenge = get_challenge_or_404(db, challenge_id)
    require_club_access(
        db, user, challenge.event.club, "This challenge is in a private club"
    )
    return challenge


def can_transition_event(current: EventStatus, new: EventStatus) -> bool:
    """
    Los eventos sólo avanzan. CANCELLED es terminal y se puede alcanzar desde
    cualquier estado salvo COMPLETED.
    """
    if current in (EventStatus.COMPLETED, EventStatus.CANCELLED):
        return False
    if new == EventStatus.CANCELLED:
        return True
    return EVENT_STATUS_ORDER[new] > EVENT_STATUS_ORDER[current]


def create_event(db: Session, user: User, data: EventCreate) -> Event:
    """Crea el evento en DRAFT junto con sus challenges en PENDING"""
    get_club_or_404(db, data.club_id)
    require_club_permission(
        db,
        user,
        data.club_id,
        ClubPermission.EVENTS_MANAGE_ATTENDANCE,
        "Only club admins can create events",
    )

    event = Event(
        **data.model_dump(exclude={"challenges"}),
        organizer_id=user.id,
        status=EventStatus.DRAFT,
    )
    db.add(event)
    db.flush()

    for challenge in data.challenges:
        db.add(
            Challenge(
                **challenge.model_dump(),
                event_id=event.id,
                creator_id=user.id,
                status=ChallengeStatus.PENDING,
            )
        )

    db.commit()
    db.refresh(event)
    logger.info(
        f"event.created | event={event.id} | club={event.club_id} | "
        f"challenges={len(data.challenges)} | by={user.id}"
    )
    return event


def transition_event(
    db: Session, user: User, event_id: int, new_status: EventStatus
) -> Event:
    event = get_event_or_404(db, event_id)
    require_club_permission(
        db, user, event.club_id, ClubPermission.EVENTS_MANAGE_ATTENDANCE
    )

    if not can_transition_event(event.status, new_status):
        raise InvalidStateError(
            f"Cannot move event from {event.status.value} to {new_status.value}"
        )

    previous = event.status
    event.status = new_status
    db.commit()
    db.refresh(event)
    logger.info(
        f"event.status | event={event_id} | {previous.value} -> {new_status.value} | "
        f"by={user.id}"
    )
    return event


def create_challenge(db: Session, user: User, data: ChallengeCreate) -> Challenge:
    event = get_event_or_404(db, data.event_id)
    require_club_permission(
        db,
        user,
        event.club_id,
        ClubPermission.CHALLENGES_UPDATE_ANY,
        "Only club admins can create event challenges",
    )

    if event.status in (EventStatus.COMPLETED, EventStatus.CANCELLED):
        raise InvalidStateError("Cannot add challenges to a finished event")

    challenge = Challenge(
        **data.model_dump(), creator_id=user.id, status=ChallengeStatus.PENDING
    )
    db.add(challenge)
    db.commit()
    db.refresh(challenge)
    logger.info(
        f"challenge.created | challenge={challenge.id} | event={event.id} | by={user.id}"
    )
    return challenge


def transition_challenge(
    db: Session, user: User, challenge_id: int, new_status: ChallengeStatus
) -> Challenge:
    challenge = get_challenge_or_404(db, challenge_id)
    require_club_permission(
        db, user, challenge.event.club_id, ClubPermission.CHALLENGES_UPDATE_ANY
    )

    if new_status == ChallengeStatus.COMPLETED:
        raise InvalidStateError("Challenges are completed through settlement")

    if new_status not in CHALLENGE_TRANSITIONS[challenge.status]:
        raise InvalidStateError(
            f"Cannot move challenge from {challenge.status.value} to {new_status.value}"
        )

    previous = challenge.status
    challenge.status = new_status
    db.commit()
    db.refresh(challenge)
    logger.info(
        f"challenge.status | challenge={challenge_id} | "
        f"{previous.value} -> {new_status.value} | by={user.id}"
    )
    return challenge
