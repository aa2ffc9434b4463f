from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.challenge import (
    BonusPoolResponse,
    ChallengeCreate,
    ChallengeEntryResponse,
    ChallengeRegistrationResponse,
    ChallengeResponse,
    ChallengeStatusUpdate,
    CompleteChallengeRequest,
    PayoutSplit,
    SettlementResponse,
)
from app.services import events as event_service
from app.services import ledger, settlement
from app.services.auth import get_current_user

router = APIRouter()


def _settlement_to_response(result: settlement.Settlement) -> SettlementResponse:
    return SettlementResponse(
        challenge=ChallengeResponse.model_validate(result.challenge),
        bonus_pool_usd=result.bonus_pool,
        payouts=PayoutSplit(
            first=result.payouts.first,
            second=result.payouts.second,
            third=result.payouts.third,
        ),
    )


@router.post("/", response_model=ChallengeResponse)
def create_challenge(
    challenge: ChallengeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return event_service.create_challenge(db, current_user, challenge)


@router.get("/{challenge_id}", response_model=ChallengeResponse)
def read_challenge(
    challenge_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return event_service.get_challenge_for_reader(db, current_user, challenge_id)


@router.put("/{challenge_id}/status", response_model=ChallengeResponse)
def update_challenge_status(
    challenge_id: int,
    payload: ChallengeStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return event_service.transition_challenge(
        db, current_user, challenge_id, payload.status
    )


@router.post("/{challenge_id}/enter", response_model=ChallengeRegistrationResponse)
def enter_challenge(
    challenge_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = ledger.register_challenge_entry(db, current_user, challenge_id)
    return ChallengeRegistrationResponse(
        entry=ChallengeEntryResponse.model_validate(entry),
        payment_required=entry.payment_reference is not None,
    )


@router.get("/{challenge_id}/bonus-pool", response_model=BonusPoolResponse)
def read_bonus_pool(
    challenge_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    challenge = event_service.get_challenge_for_reader(db, current_user, challenge_id)
    return BonusPoolResponse(
        challenge_id=challenge.id,
        bonus_pool_percent_of_event_fees=Decimal(
            challenge.bonus_pool_percent_of_event_fees or 0
        ),
        event_fees_usd=ledger.aggregate_event_fees(db, challenge.event),
        bonus_pool_usd=settlement.compute_challenge_bonus_pool(db, challenge),
    )


@router.post("/{challenge_id}/complete", response_model=SettlementResponse)
def complete_challenge(
    challenge_id: int,
    payload: CompleteChallengeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = settlement.complete_challenge(
        db,
        current_user,
        challenge_id,
        payload.first_place_user_id,
        payload.second_place_user_id,
        payload.third_place_user_id,
    )
    return _settlement_to_response(result)


@router.get("/{challenge_id}/settlement", response_model=SettlementResponse)
def read_settlement(
    challenge_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    event_service.get_challenge_for_reader(db, current_user, challenge_id)
    return _settlement_to_response(settlement.get_settlement(db, challenge_id))
