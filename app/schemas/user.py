from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from app.enums.roles import ClubRole, SiteRole


class MembershipSnapshot(BaseModel):
    club_id: int
    role: ClubRole

    class Config:
        from_attributes = True


class UserWithPermissions(BaseModel):
    """Snapshot inmutable usado por el resolver de permisos"""

    id: int
    site_role: SiteRole
    club_memberships: List[MembershipSnapshot] = []

    class Config:
        frozen = True


class UserResponse(BaseModel):
    id: int
    external_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    site_role: SiteRole
    created_at: datetime

    class Config:
        from_attributes = True


class SiteRoleUpdate(BaseModel):
    site_role: SiteRole


class PermissionsResponse(BaseModel):
    user_id: int
    site_role: SiteRole
    site_permissions: List[str]
    club_memberships: List[MembershipSnapshot]
