from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from app.models.event import EventStatus
from app.schemas.challenge import ChallengeCreateInline


class EventBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None
    start_date_time: Optional[datetime] = None
    end_date_time: Optional[datetime] = None
    is_public: bool = True
    entry_fee_usd: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    max_attendees: Optional[int] = Field(None, gt=0)


class EventCreate(EventBase):
    club_id: int
    challenges: List[ChallengeCreateInline] = []


class EventStatusUpdate(BaseModel):
    status: EventStatus


class EventResponse(EventBase):
    id: int
    club_id: int
    organizer_id: int
    status: EventStatus
    created_at: datetime

    class Config:
        from_attributes = True


class EventEntryResponse(BaseModel):
    id: int
    event_id: int
    user_id: int
    payment_reference: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class EventRegistrationResponse(BaseModel):
    entry: EventEntryResponse
    payment_required: bool


class EventFeesResponse(BaseModel):
    event_id: int
    entry_count: int
    entry_fee_usd: Optional[Decimal] = None
    total_fees_usd: Decimal
