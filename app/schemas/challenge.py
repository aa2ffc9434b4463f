from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

from app.models.challenge import ChallengeStatus


class ChallengeCreateInline(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    entry_fee_usd: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    bonus_pool_percent_of_event_fees: Decimal = Field(
        Decimal("0"), ge=0, le=100, decimal_places=2
    )


class ChallengeCreate(ChallengeCreateInline):
    event_id: int


class ChallengeStatusUpdate(BaseModel):
    status: ChallengeStatus


class ChallengeResponse(BaseModel):
    id: int
    event_id: int
    title: str
    description: Optional[str] = None
    entry_fee_usd: Optional[Decimal] = None
    bonus_pool_percent_of_event_fees: Decimal
    status: ChallengeStatus
    first_place_user_id: Optional[int] = None
    second_place_user_id: Optional[int] = None
    third_place_user_id: Optional[int] = None
    payouts_released_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ChallengeEntryResponse(BaseModel):
    id: int
    challenge_id: int
    user_id: int
    payment_reference: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ChallengeRegistrationResponse(BaseModel):
    entry: ChallengeEntryResponse
    payment_required: bool


class BonusPoolResponse(BaseModel):
    challenge_id: int
    bonus_pool_percent_of_event_fees: Decimal
    event_fees_usd: Decimal
    bonus_pool_usd: Decimal


class CompleteChallengeRequest(BaseModel):
    first_place_user_id: int
    second_place_user_id: int
    third_place_user_id: int


class PayoutSplit(BaseModel):
    first: Decimal
    second: Decimal
    third: Decimal


class SettlementResponse(BaseModel):
    challenge: ChallengeResponse
    bonus_pool_usd: Decimal
    payouts: PayoutSplit
