"""
Inscripciones a eventos y challenges, y agregación de lo recaudado.

Una inscripción existe aunque el pago no se haya capturado todavía: sólo
guardamos la referencia opaca que devuelve el colaborador de pagos.
"""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud import challenge as challenge_crud
from app.crud import event as event_crud
from app.crud import membership as membership_crud
from app.models.challenge import ChallengeStatus
from app.models.challenge_entry import ChallengeEntry
from app.models.event import Event, EventStatus
from app.models.event_entry import EventEntry
from app.models.user import User
from app.services.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PreconditionFailedError,
)
from app.services.events import get_challenge_or_404
from app.services.payments import PaymentGateway, payment_gateway

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
CENTS = Decimal("0.01")

REGISTRATION_OPEN_STATUSES = (EventStatus.PUBLISHED, EventStatus.ONGOING)


def has_fee(amount: Optional[Decimal]) -> bool:
    return amount is not None and Decimal(amount) > 0


def register_event_entry(
    db: Session,
    user: User,
    event_id: int,
    gateway: Optional[PaymentGateway] = None,
) -> EventEntry:
    gateway = gateway or payment_gateway
    event = event_crud.get_event_for_update(db, event_id)
    if not event:
        raise NotFoundError("Event not found")

    if event.status not in REGISTRATION_OPEN_STATUSES:
        raise BadRequestError("Event is not open for registration")

    if event_crud.get_event_entry(db, event_id, user.id):
        raise ConflictError("You are already registered for this event")

    if event.max_attendees and (
        event_crud.count_event_entries(db, event_id) >= event.max_attendees
    ):
        raise BadRequestError("Event is full")

    if membership_crud.get_active_ban(db, user.id, event.club_id):
        raise ForbiddenError("You are banned from this club")

    if not event.is_public and not membership_crud.get_membership(
        db, user.id, event.club_id
    ):
        raise ForbiddenError("This event is only open to club members")

    entry = EventEntry(event_id=event_id, user_id=user.id)
    db.add(entry)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ConflictError("You are already registered for this event")

    # El cupo se vuelve a contar con la inscripción ya escrita
    if event.max_attendees and (
        event_crud.count_event_entries(db, event_id) > event.max_attendees
    ):
        db.rollback()
        raise BadRequestError("Event is full")

    if has_fee(event.entry_fee_usd):
        entry.payment_reference = gateway.create_payment_reference(
            "event",
            event.entry_fee_usd,
            {"event_id": str(event.id), "user_id": str(user.id)},
        )

    db.commit()
    db.refresh(entry)

    logger.info(f"event.entry.created | event={event_id} | user={user.id}")
    return entry


def register_challenge_entry(
    db: Session,
    user: User,
    challenge_id: int,
    gateway: Optional[PaymentGateway] = None,
) -> ChallengeEntry:
    gateway = gateway or payment_gateway
    challenge = get_challenge_or_404(db, challenge_id)

    if challenge.status != ChallengeStatus.ACTIVE:
        raise BadRequestError("Challenge is not active")

    if challenge_crud.get_challenge_entry(db, challenge_id, user.id):
        raise ConflictError("You are already entered in this challenge")

    if not event_crud.get_event_entry(db, challenge.event_id, user.id):
        raise PreconditionFailedError(
            "You must be registered for the event to enter challenges"
        )

    payment_reference = None
    if has_fee(challenge.entry_fee_usd):
        payment_reference = gateway.create_payment_reference(
            "challenge",
            challenge.entry_fee_usd,
            {"challenge_id": str(challenge.id), "user_id": str(user.id)},
        )

    entry = ChallengeEntry(
        challenge_id=challenge_id, user_id=user.id, payment_reference=payment_reference
    )
    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("You are already entered in this challenge")
    db.refresh(entry)

    logger.info(f"challenge.entry.created | challenge={challenge_id} | user={user.id}")
    return entry


def aggregate_event_fees(db: Session, event: Event) -> Decimal:
    """
    Total recaudado por inscripciones al evento.

    La tarifa es del evento, no de cada fila: total = tarifa x inscripciones.
    """
    if not has_fee(event.entry_fee_usd):
        return ZERO

    entry_count = event_crud.count_event_entries(db, event.id)
    return (Decimal(event.entry_fee_usd) * entry_count).quantize(CENTS)
