from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.models.club_ban import ClubBan
from app.models.user import User
from app.schemas.club import ClubCreate, ClubResponse, MembershipResponse
from app.schemas.membership import (
    BanCreate,
    BanResponse,
    BulkMemberActionRequest,
    BulkMemberActionResponse,
    JoinRequestCreate,
    JoinRequestResponse,
    JoinRequestReview,
    RoleUpdate,
)
from app.services import membership as membership_service
from app.services.auth import get_current_user

router = APIRouter()


def _ban_to_response(club_ban: ClubBan) -> BanResponse:
    return BanResponse(
        id=club_ban.id,
        user_id=club_ban.user_id,
        club_id=club_ban.club_id,
        banned_by_id=club_ban.banned_by_id,
        reason=club_ban.reason,
        is_permanent=club_ban.is_permanent,
        expires_at=club_ban.expires_at,
        is_active=club_ban.is_active_at(),
        created_at=club_ban.created_at,
    )


@router.post("/", response_model=ClubResponse)
def create_club(
    club: ClubCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return membership_service.create_club(db, current_user, club)


@router.get("/", response_model=List[ClubResponse])
def read_clubs(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return membership_service.list_clubs(db, current_user, skip=skip, limit=limit)


@router.get("/{club_id}", response_model=ClubResponse)
def read_club(
    club_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return membership_service.get_club_for_reader(db, current_user, club_id)


@router.post("/{club_id}/join", response_model=MembershipResponse)
def join_club(
    club_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return membership_service.join_club(db, current_user, club_id)


@router.post("/{club_id}/leave")
def leave_club(
    club_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    membership_service.leave_club(db, current_user, club_id)
    return {"message": "Left club successfully"}


# ==================== JOIN REQUESTS ====================


@router.post("/{club_id}/join-requests", response_model=JoinRequestResponse)
def request_join(
    club_id: int,
    payload: JoinRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return membership_service.request_join(db, current_user, club_id, payload.message)


@router.delete("/{club_id}/join-requests")
def cancel_join_request(
    club_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    membership_service.cancel_join_request(db, current_user, club_id)
    return {"message": "Join request cancelled"}


@router.get("/{club_id}/join-requests", response_model=List[JoinRequestResponse])
def list_join_requests(
    club_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return membership_service.list_join_requests(db, current_user, club_id)


@router.post(
    "/join-requests/{request_id}/review", response_model=JoinRequestResponse
)
def review_join_request(
    request_id: int,
    payload: JoinRequestReview,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return membership_service.review_join_request(
        db, current_user, request_id, payload.decision
    )


# ==================== MEMBERS ====================


@router.get("/{club_id}/members", response_model=List[MembershipResponse])
def read_members(
    club_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return membership_service.list_members(db, current_user, club_id)


@router.put("/{club_id}/members/{user_id}/role", response_model=MembershipResponse)
def update_member_role(
    club_id: int,
    user_id: int,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return membership_service.update_role(
        db, current_user, club_id, user_id, payload.role
    )


@router.delete("/{club_id}/members/{user_id}")
def remove_member(
    club_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    membership_service.remove_member(db, current_user, club_id, user_id)
    return {"message": "Member removed successfully"}


@router.post("/{club_id}/members/bulk", response_model=BulkMemberActionResponse)
def bulk_member_action(
    club_id: int,
    payload: BulkMemberActionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    results = membership_service.bulk_member_action(
        db,
        current_user,
        club_id,
        payload.user_ids,
        payload.action,
        ban_reason=payload.ban_reason,
        ban_permanent=payload.ban_permanent,
        ban_duration_days=payload.ban_duration_days,
    )
    return BulkMemberActionResponse(action=payload.action, results=results)


# ==================== BANS ====================


@router.post("/{club_id}/bans", response_model=BanResponse)
def ban_user(
    club_id: int,
    payload: BanCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    club_ban = membership_service.ban(
        db,
        current_user,
        club_id,
        payload.user_id,
        reason=payload.reason,
        permanent=payload.permanent,
        duration_days=payload.duration_days,
    )
    return _ban_to_response(club_ban)


@router.delete("/{club_id}/bans/{user_id}")
def unban_user(
    club_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    membership_service.unban(db, current_user, club_id, user_id)
    return {"message": "User unbanned successfully"}


@router.get("/{club_id}/bans", response_model=List[BanResponse])
def list_bans(
    club_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return [
        _ban_to_response(b)
        for b in membership_service.list_bans(db, current_user, club_id)
    ]
