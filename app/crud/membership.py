from sqlalchemy import and_
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime

from app.models.club_member import ClubMember
from app.models.club_join_request import ClubJoinRequest, JoinRequestStatus
from app.models.club_ban import ClubBan, active_ban_clause


def get_membership(db: Session, user_id: int, club_id: int) -> Optional[ClubMember]:
    return (
        db.query(ClubMember)
        .filter(and_(ClubMember.user_id == user_id, ClubMember.club_id == club_id))
        .first()
    )


def get_club_members(db: Session, club_id: int) -> List[ClubMember]:
    return (
        db.query(ClubMember)
        .filter(ClubMember.club_id == club_id)
        .order_by(ClubMember.joined_at.asc())
        .all()
    )


def get_join_request_for_update(
    db: Session, request_id: int
) -> Optional[ClubJoinRequest]:
    """Bloquea la fila de la solicitud para serializar revisiones simultáneas"""
    return (
        db.query(ClubJoinRequest)
        .filter(ClubJoinRequest.id == request_id)
        .with_for_update()
        .first()
    )


def get_pending_join_request(
    db: Session, user_id: int, club_id: int
) -> Optional[ClubJoinRequest]:
    return (
        db.query(ClubJoinRequest)
        .filter(
            and_(
                ClubJoinRequest.user_id == user_id,
                ClubJoinRequest.club_id == club_id,
                ClubJoinRequest.status == JoinRequestStatus.PENDING,
            )
        )
        .first()
    )


def get_pending_join_requests(db: Session, club_id: int) -> List[ClubJoinRequest]:
    return (
        db.query(ClubJoinRequest)
        .filter(
            and_(
                ClubJoinRequest.club_id == club_id,
                ClubJoinRequest.status == JoinRequestStatus.PENDING,
            )
        )
        .order_by(ClubJoinRequest.created_at.desc())
        .all()
    )


def get_ban(db: Session, user_id: int, club_id: int) -> Optional[ClubBan]:
    """Registro de ban (activo o vencido) para el par usuario/club"""
    return (
        db.query(ClubBan)
        .filter(and_(ClubBan.user_id == user_id, ClubBan.club_id == club_id))
        .first()
    )


def get_active_ban(
    db: Session, user_id: int, club_id: int, now: Optional[datetime] = None
) -> Optional[ClubBan]:
    """Ban vigente. El vencimiento se re-evalúa en cada consulta."""
    return (
        db.query(ClubBan)
        .filter(
            and_(
                ClubBan.user_id == user_id,
                ClubBan.club_id == club_id,
                active_ban_clause(now),
            )
        )
        .first()
    )


def get_club_bans(db: Session, club_id: int) -> List[ClubBan]:
    return (
        db.query(ClubBan)
        .filter(ClubBan.club_id == club_id)
        .order_by(ClubBan.created_at.desc())
        .all()
    )
