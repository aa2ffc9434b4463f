from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.enums.roles import ClubRole


class ClubBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    city: Optional[str] = None
    is_private: bool = False


class ClubCreate(ClubBase):
    pass


class ClubResponse(ClubBase):
    id: int
    creator_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class MembershipResponse(BaseModel):
    id: int
    user_id: int
    club_id: int
    role: ClubRole
    joined_at: datetime

    class Config:
        from_attributes = True
