from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum

from app.enums.roles import ClubRole
from app.models.club_join_request import JoinRequestStatus


class ReviewDecision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class BulkMemberActionType(str, Enum):
    REMOVE = "remove"
    PROMOTE_MODERATOR = "promote_moderator"
    DEMOTE_MEMBER = "demote_member"
    BAN = "ban"


class JoinRequestCreate(BaseModel):
    message: Optional[str] = Field(None, max_length=500)


class JoinRequestReview(BaseModel):
    decision: ReviewDecision


class JoinRequestResponse(BaseModel):
    id: int
    user_id: int
    club_id: int
    status: JoinRequestStatus
    message: Optional[str] = None
    reviewed_by_id: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class RoleUpdate(BaseModel):
    role: ClubRole


class BanCreate(BaseModel):
    user_id: int
    reason: Optional[str] = None
    permanent: bool = False
    duration_days: Optional[int] = None  # Obligatorio si permanent es False


class BanResponse(BaseModel):
    id: int
    user_id: int
    club_id: int
    banned_by_id: int
    reason: Optional[str] = None
    is_permanent: bool
    expires_at: Optional[datetime] = None
    is_active: bool  # Calculado al momento de la lectura
    created_at: datetime


class BulkMemberActionRequest(BaseModel):
    user_ids: List[int]
    action: BulkMemberActionType
    ban_reason: Optional[str] = None
    ban_permanent: bool = False
    ban_duration_days: Optional[int] = None


class BulkMemberResult(BaseModel):
    user_id: int
    success: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None


class BulkMemberActionResponse(BaseModel):
    action: BulkMemberActionType
    results: List[BulkMemberResult]
