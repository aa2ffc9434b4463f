"""
Liquidación de challenges.

El pozo de premios sale de lo recaudado por el evento padre y se reparte
50/30/20 entre los tres ganadores. Completar un challenge es un paso único:
un segundo intento falla con Conflict y nunca vuelve a pagar.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.crud import challenge as challenge_crud
from app.enums.permissions import ClubPermission
from app.models.challenge import Challenge, ChallengeStatus
from app.models.user import User
from app.services.access import require_club_permission
from app.services.errors import (
    BadRequestError,
    ConflictError,
    InvalidStateError,
)
from app.services.events import get_challenge_or_404
from app.services.ledger import CENTS, aggregate_event_fees
from app.services.payments import PaymentGateway, payment_gateway

logger = logging.getLogger(__name__)

# Reparto fijo del pozo (primero, segundo); el tercero recibe el resto (20%)
FIRST_PLACE_SHARE = Decimal("0.50")
SECOND_PLACE_SHARE = Decimal("0.30")
THIRD_PLACE_SHARE = Decimal("0.20")


@dataclass(frozen=True)
class PayoutSplit:
    first: Decimal
    second: Decimal
    third: Decimal


@dataclass(frozen=True)
class Settlement:
    challenge: Challenge
    bonus_pool: Decimal
    payouts: PayoutSplit


def to_cents(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_challenge_bonus_pool(db: Session, challenge: Challenge) -> Decimal:
    """
    Pozo = recaudado del evento x porcentaje / 100.
    Se recalcula siempre desde el ledger, nunca se cachea.
    """
    event_fees = aggregate_event_fees(db, challenge.event)
    percent = Decimal(challenge.bonus_pool_percent_of_event_fees or 0)
    return to_cents(event_fees * percent / Decimal(100))


def split_bonus_pool(bonus_pool: Decimal) -> PayoutSplit:
    """El tercero se lleva la diferencia para que la suma sea exacta al centavo"""
    first = to_cents(bonus_pool * FIRST_PLACE_SHARE)
    second = to_cents(bonus_pool * SECOND_PLACE_SHARE)
    third = to_cents(bonus_pool) - first - second
    return PayoutSplit(first=first, second=second, third=third)


def complete_challenge(
    db: Session,
    user: User,
    challenge_id: int,
    first_place_user_id: int,
    second_place_user_id: int,
    third_place_user_id: int,
    gateway: Optional[PaymentGateway] = None,
) -> Settlement:
    gateway = gateway or payment_gateway
    challenge = get_challenge_or_404(db, challenge_id)

    require_club_permission(
        db,
        user,
        challenge.event.club_id,
        ClubPermission.CHALLENGES_VALIDATE_SUBMISSIONS,
        "Only club admins can complete challenges",
    )

    if challenge.status == ChallengeStatus.COMPLETED:
        logger.warning(
            f"Rejected repeated settlement of challenge {challenge_id} by user {user.id}"
        )
        raise ConflictError("Challenge has already been completed")

    if challenge.status != ChallengeStatus.ACTIVE:
        raise InvalidStateError("Challenge is not active")

    winner_ids = [first_place_user_id, second_place_user_id, third_place_user_id]
    if len(set(winner_ids)) != 3:
        raise BadRequestError("Winners must be three different participants")

    if challenge_crud.count_participants_among(db, challenge_id, winner_ids) != 3:
        raise BadRequestError("All winners must be challenge participants")

    bonus_pool = compute_challenge_bonus_pool(db, challenge)
    payouts = split_bonus_pool(bonus_pool)

    # Compare-and-set sobre el estado: sólo una llamada concurrente gana
    updated = (
        db.query(Challenge)
        .filter(
            Challenge.id == challenge_id,
            Challenge.status == ChallengeStatus.ACTIVE,
        )
        .update(
            {
                Challenge.status: ChallengeStatus.COMPLETED,
                Challenge.first_place_user_id: first_place_user_id,
                Challenge.second_place_user_id: second_place_user_id,
                Challenge.third_place_user_id: third_place_user_id,
                Challenge.bonus_pool_usd: bonus_pool,
                Challenge.first_place_payout_usd: payouts.first,
                Challenge.second_place_payout_usd: payouts.second,
                Challenge.third_place_payout_usd: payouts.third,
                Challenge.payouts_released_at: datetime.utcnow(),
            },
            synchronize_session=False,
        )
    )
    if updated != 1:
        db.rollback()
        logger.warning(f"Concurrent settlement lost for challenge {challenge_id}")
        raise ConflictError("Challenge has already been completed")

    db.commit()
    db.refresh(challenge)

    logger.info(
        f"challenge.completed | challenge={challenge_id} | pool={bonus_pool} | "
        f"payouts={payouts.first}/{payouts.second}/{payouts.third} | by={user.id}"
    )

    # Fuera de la transacción: un fallo del proveedor no deshace la liquidación
    try:
        gateway.release_payouts(
            challenge_id,
            {
                first_place_user_id: payouts.first,
                second_place_user_id: payouts.second,
                third_place_user_id: payouts.third,
            },
        )
    except Exception as e:
        logger.error(f"Error releasing payouts for challenge {challenge_id}: {e}")

    return Settlement(challenge=challenge, bonus_pool=bonus_pool, payouts=payouts)


def get_settlement(db: Session, challenge_id: int) -> Settlement:
    """Devuelve lo registrado al liquidar, sin recalcular nada"""
    challenge = get_challenge_or_404(db, challenge_id)
    if challenge.status != ChallengeStatus.COMPLETED:
        raise InvalidStateError("Challenge has not been settled")

    return Settlement(
        challenge=challenge,
        bonus_pool=Decimal(challenge.bonus_pool_usd),
        payouts=PayoutSplit(
            first=Decimal(challenge.first_place_payout_usd),
            second=Decimal(challenge.second_place_payout_usd),
            third=Decimal(challenge.third_place_payout_usd),
        ),
    )
