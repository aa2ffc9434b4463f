"""
Ciclo de vida de las membresías de un club.

Estados por (usuario, club): NONE -> REQUESTED -> MEMBER -> {BANNED, REMOVED}.
Un unban vuelve a NONE, nunca restaura la membresía anterior.

Cada operación pública es una unidad de trabajo: valida, prepara los cambios
en la sesión y hace un único commit. Si algo falla no queda nada escrito.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud import club as club_crud
from app.crud import membership as membership_crud
from app.crud import user as user_crud
from app.enums.permissions import ClubPermission, SitePermission
from app.enums.roles import CLUB_ROLE_RANK, ClubRole, SiteRole
from app.models.club import Club
from app.models.club_ban import ClubBan
from app.models.club_join_request import ClubJoinRequest, JoinRequestStatus
from app.models.club_member import ClubMember
from app.models.user import User
from app.schemas.club import ClubCreate
from app.schemas.membership import BulkMemberActionType, BulkMemberResult, ReviewDecision
from app.services.access import (
    get_club_or_404,
    get_user_or_404,
    require_club_access,
    require_club_permission,
    require_site_permission,
)
from app.services.errors import (
    BadRequestError,
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
)
from app.utils.permissions import can_access_club

logger = logging.getLogger(__name__)


def _commit_or_conflict(db: Session, message: str) -> None:
    """Commit; una violación de unicidad por carrera se reporta como Conflict"""
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(message)


# ==================== CLUBS ====================


def create_club(db: Session, user: User, club: ClubCreate) -> Club:
    require_site_permission(
        db, user, SitePermission.CLUBS_CREATE, "You are not allowed to create clubs"
    )
    return club_crud.create_club(db, club, creator_id=user.id)


def get_club_for_reader(db: Session, user: User, club_id: int) -> Club:
    club = get_club_or_404(db, club_id)
    require_club_access(db, user, club)
    return club


def list_clubs(db: Session, user: User, skip: int = 0, limit: int = 100) -> List[Club]:
    """Clubs públicos y los privados de los que el usuario es miembro"""
    snapshot = user_crud.load_user_permissions(db, user)
    clubs = club_crud.get_clubs(db, skip=skip, limit=limit)
    return [c for c in clubs if can_access_club(snapshot, c)]


def list_members(db: Session, user: User, club_id: int) -> List[ClubMember]:
    get_club_or_404(db, club_id)
    require_club_permission(db, user, club_id, ClubPermission.MEMBERS_VIEW_LIST)
    return membership_crud.get_club_members(db, club_id)


def join_club(db: Session, user: User, club_id: int) -> ClubMember:
    """
    Ingreso directo a un club público. Deja una solicitud APPROVED como
    respaldo de la membresía (reutiliza la PENDING si ya había una).
    """
    club = get_club_or_404(db, club_id)

    if club.is_private:
        raise ForbiddenError("Cannot join private club without an approved request")

    if membership_crud.get_membership(db, user.id, club_id):
        raise ConflictError("Already a member of this club")

    if membership_crud.get_active_ban(db, user.id, club_id):
        raise ForbiddenError("You are banned from this club")

    now = datetime.utcnow()
    join_request = membership_crud.get_pending_join_request(db, user.id, club_id)
    if join_request is None:
        join_request = ClubJoinRequest(user_id=user.id, club_id=club_id)
        db.add(join_request)
    join_request.status = JoinRequestStatus.APPROVED
    join_request.reviewed_at = now

    membership = ClubMember(
        user_id=user.id, club_id=club_id, role=ClubRole.MEMBER, joined_at=now
    )
    db.add(membership)
    _commit_or_conflict(db, "Already a member of this club")
    db.refresh(membership)

    logger.info(f"club.joined | club={club_id} | user={user.id}")
    return membership


def leave_club(db: Session, user: User, club_id: int) -> None:
    club = get_club_or_404(db, club_id)
    membership = membership_crud.get_membership(db, user.id, club_id)
    if not membership:
        raise NotFoundError("Not a member of this club")

    if club.creator_id == user.id:
        raise ForbiddenError("Club creator cannot leave the club")

    db.delete(membership)
    db.commit()
    logger.info(f"club.left | club={club_id} | user={user.id}")


# ==================== JOIN REQUESTS ====================


def request_join(
    db: Session, user: User, club_id: int, message: Optional[str] = None
) -> ClubJoinRequest:
    get_club_or_404(db, club_id)

    if membership_crud.get_membership(db, user.id, club_id):
        raise ConflictError("Already a member of this club")

    if membership_crud.get_pending_join_request(db, user.id, club_id):
        raise ConflictError("Join request already pending")

    if membership_crud.get_active_ban(db, user.id, club_id):
        raise ForbiddenError("You are banned from this club")

    join_request = ClubJoinRequest(
        user_id=user.id,
        club_id=club_id,
        status=JoinRequestStatus.PENDING,
        message=message,
    )
    db.add(join_request)
    _commit_or_conflict(db, "Join request already pending")
    db.refresh(join_request)

    logger.info(f"club.join_request.created | club={club_id} | user={user.id}")
    return join_request


def cancel_join_request(db: Session, user: User, club_id: int) -> None:
    join_request = membership_crud.get_pending_join_request(db, user.id, club_id)
    if not join_request:
        raise NotFoundError("No pending join request found")

    db.delete(join_request)
    db.commit()
    logger.info(f"club.join_request.cancelled | club={club_id} | user={user.id}")


def list_join_requests(db: Session, user: User, club_id: int) -> List[ClubJoinRequest]:
    get_club_or_404(db, club_id)
    require_club_permission(db, user, club_id, ClubPermission.MEMBERS_VIEW_LIST)
    return membership_crud.get_pending_join_requests(db, club_id)


def review_join_request(
    db: Session, reviewer: User, request_id: int, decision: ReviewDecision
) -> ClubJoinRequest:
    """
    Aprueba o rechaza una solicitud PENDING.

    Al aprobar, el cambio de estado de la solicitud y la creación de la
    membresía se escriben en el mismo commit.
    """
    join_request = membership_crud.get_join_request_for_update(db, request_id)
    if not join_request or join_request.status != JoinRequestStatus.PENDING:
        raise NotFoundError("Join request not found or already processed")

    require_club_permission(
        db, reviewer, join_request.club_id, ClubPermission.MEMBERS_INVITE
    )

    now = datetime.utcnow()

    if decision == ReviewDecision.APPROVE:
        if membership_crud.get_active_ban(
            db, join_request.user_id, join_request.club_id, now
        ):
            raise ForbiddenError("User is banned from this club")

        if membership_crud.get_membership(
            db, join_request.user_id, join_request.club_id
        ):
            raise ConflictError("User is already a member of this club")

        join_request.status = JoinRequestStatus.APPROVED
        join_request.reviewed_by_id = reviewer.id
        join_request.reviewed_at = now
        db.add(
            ClubMember(
                user_id=join_request.user_id,
                club_id=join_request.club_id,
                role=ClubRole.MEMBER,
                joined_at=now,
            )
        )
        _commit_or_conflict(db, "User is already a member of this club")
    else:
        join_request.status = JoinRequestStatus.REJECTED
        join_request.reviewed_by_id = reviewer.id
        join_request.reviewed_at = now
        db.commit()

    db.refresh(join_request)
    logger.info(
        f"club.join_request.{join_request.status.value.lower()} | "
        f"club={join_request.club_id} | user={join_request.user_id} | "
        f"reviewer={reviewer.id}"
    )
    return join_request


# ==================== ROLES ====================


def _apply_role_change(
    db: Session, club: Club, target_user_id: int, new_role: ClubRole
) -> ClubMember:
    membership = membership_crud.get_membership(db, target_user_id, club.id)
    if not membership:
        raise NotFoundError("User is not a member of this club")

    if (
        target_user_id == club.creator_id
        and CLUB_ROLE_RANK[new_role] < CLUB_ROLE_RANK[ClubRole.ADMIN]
    ):
        raise BadRequestError("Club creator cannot be demoted below ADMIN")

    membership.role = new_role
    return membership


def update_role(
    db: Session, user: User, club_id: int, target_user_id: int, new_role: ClubRole
) -> ClubMember:
    club = get_club_or_404(db, club_id)
    require_club_permission(db, user, club_id, ClubPermission.MEMBERS_PROMOTE)

    membership = _apply_role_change(db, club, target_user_id, new_role)
    db.commit()
    db.refresh(membership)

    logger.info(
        f"club.member.role_updated | club={club_id} | target={target_user_id} | "
        f"role={new_role.value} | by={user.id}"
    )
    return membership


def update_site_role(
    db: Session, user: User, target_user_id: int, new_role: SiteRole
) -> User:
    require_site_permission(
        db, user, SitePermission.USERS_PROMOTE, "Only super admins can change site roles"
    )
    target = get_user_or_404(db, target_user_id)
    target.site_role = new_role
    db.commit()
    db.refresh(target)

    logger.info(
        f"user.site_role_updated | target={target_user_id} | role={new_role.value} | "
        f"by={user.id}"
    )
    return target


# ==================== REMOVAL ====================


def _apply_removal(db: Session, club: Club, target_user_id: int) -> None:
    if target_user_id == club.creator_id:
        raise ForbiddenError("Cannot remove club creator")

    membership = membership_crud.get_membership(db, target_user_id, club.id)
    if not membership:
        raise NotFoundError("User is not a member of this club")

    db.delete(membership)


def remove_member(db: Session, user: User, club_id: int, target_user_id: int) -> None:
    club = get_club_or_404(db, club_id)
    require_club_permission(db, user, club_id, ClubPermission.MEMBERS_REMOVE)

    _apply_removal(db, club, target_user_id)
    db.commit()
    logger.info(
        f"club.member.removed | club={club_id} | target={target_user_id} | by={user.id}"
    )


# ==================== BANS ====================


def _validate_ban_duration(permanent: bool, duration_days: Optional[int]) -> None:
    if not permanent and (duration_days is None or duration_days <= 0):
        raise BadRequestError(
            "Temporary bans require a positive duration in days"
        )


def _apply_ban(
    db: Session,
    club: Club,
    issuer_id: int,
    target_user_id: int,
    reason: Optional[str],
    permanent: bool,
    duration_days: Optional[int],
    now: datetime,
) -> ClubBan:
    """
    Crea o reemplaza el ban y quita la membresía del usuario.
    Las solicitudes PENDING del usuario quedan rechazadas.
    """
    if target_user_id == club.creator_id:
        raise ForbiddenError("Cannot ban club creator")

    expires_at = None if permanent else now + timedelta(days=duration_days)

    ban = membership_crud.get_ban(db, target_user_id, club.id)
    if ban is None:
        ban = ClubBan(user_id=target_user_id, club_id=club.id, created_at=now)
        db.add(ban)
    ban.banned_by_id = issuer_id
    ban.reason = reason
    ban.is_permanent = permanent
    ban.expires_at = expires_at

    membership = membership_crud.get_membership(db, target_user_id, club.id)
    if membership:
        db.delete(membership)

    pending = membership_crud.get_pending_join_request(db, target_user_id, club.id)
    if pending:
        pending.status = JoinRequestStatus.REJECTED
        pending.reviewed_by_id = issuer_id
        pending.reviewed_at = now

    return ban


def ban(
    db: Session,
    user: User,
    club_id: int,
    target_user_id: int,
    reason: Optional[str] = None,
    permanent: bool = False,
    duration_days: Optional[int] = None,
) -> ClubBan:
    club = get_club_or_404(db, club_id)
    require_club_permission(db, user, club_id, ClubPermission.MEMBERS_BAN)
    _validate_ban_duration(permanent, duration_days)
    get_user_or_404(db, target_user_id)

    club_ban = _apply_ban(
        db,
        club,
        user.id,
        target_user_id,
        reason,
        permanent,
        duration_days,
        datetime.utcnow(),
    )
    _commit_or_conflict(db, "User was banned concurrently")
    db.refresh(club_ban)

    logger.info(
        f"club.member.banned | club={club_id} | target={target_user_id} | "
        f"permanent={permanent} | expires_at={club_ban.expires_at} | by={user.id}"
    )
    return club_ban


def unban(db: Session, user: User, club_id: int, target_user_id: int) -> None:
    get_club_or_404(db, club_id)
    require_club_permission(db, user, club_id, ClubPermission.MEMBERS_BAN)

    active_ban = membership_crud.get_active_ban(db, target_user_id, club_id)
    if not active_ban:
        raise NotFoundError("No active ban for this user")

    db.delete(active_ban)
    db.commit()
    logger.info(
        f"club.member.unbanned | club={club_id} | target={target_user_id} | by={user.id}"
    )


def list_bans(db: Session, user: User, club_id: int) -> List[ClubBan]:
    get_club_or_404(db, club_id)
    require_club_permission(db, user, club_id, ClubPermission.MEMBERS_BAN)
    return membership_crud.get_club_bans(db, club_id)


# ==================== BULK ====================

BULK_ACTION_PERMISSIONS = {
    BulkMemberActionType.REMOVE: ClubPermission.MEMBERS_REMOVE,
    BulkMemberActionType.PROMOTE_MODERATOR: ClubPermission.MEMBERS_PROMOTE,
    BulkMemberActionType.DEMOTE_MEMBER: ClubPermission.MEMBERS_PROMOTE,
    BulkMemberActionType.BAN: ClubPermission.MEMBERS_BAN,
}


def bulk_member_action(
    db: Session,
    user: User,
    club_id: int,
    user_ids: List[int],
    action: BulkMemberActionType,
    ban_reason: Optional[str] = None,
    ban_permanent: bool = False,
    ban_duration_days: Optional[int] = None,
) -> List[BulkMemberResult]:
    """
    Aplica la misma acción a varios usuarios.

    El permiso del actor se valida una sola vez para todo el lote. Cada usuario
    se procesa en su propio savepoint: un fallo se informa en su resultado y
    no afecta al resto.
    """
    club = get_club_or_404(db, club_id)
    require_club_permission(db, user, club_id, BULK_ACTION_PERMISSIONS[action])
    if action == BulkMemberActionType.BAN:
        _validate_ban_duration(ban_permanent, ban_duration_days)

    now = datetime.utcnow()
    results = []

    for target_user_id in user_ids:
        try:
            with db.begin_nested():
                if action == BulkMemberActionType.REMOVE:
                    _apply_removal(db, club, target_user_id)
                elif action == BulkMemberActionType.PROMOTE_MODERATOR:
                    _apply_role_change(db, club, target_user_id, ClubRole.MODERATOR)
                elif action == BulkMemberActionType.DEMOTE_MEMBER:
                    _apply_role_change(db, club, target_user_id, ClubRole.MEMBER)
                elif action == BulkMemberActionType.BAN:
                    get_user_or_404(db, target_user_id)
                    _apply_ban(
                        db,
                        club,
                        user.id,
                        target_user_id,
                        ban_reason,
                        ban_permanent,
                        ban_duration_days,
                        now,
                    )
                db.flush()
            results.append(BulkMemberResult(user_id=target_user_id, success=True))
        except DomainError as e:
            results.append(
                BulkMemberResult(
                    user_id=target_user_id,
                    success=False,
                    error=e.message,
                    error_kind=e.kind,
                )
            )
        except IntegrityError as e:
            logger.error(f"Bulk {action.value} failed for user {target_user_id}: {e}")
            results.append(
                BulkMemberResult(
                    user_id=target_user_id,
                    success=False,
                    error="Concurrent modification",
                    error_kind=ConflictError.kind,
                )
            )

    db.commit()

    succeeded = sum(1 for r in results if r.success)
    logger.info(
        f"club.bulk_member_action | club={club_id} | action={action.value} | "
        f"ok={succeeded}/{len(results)} | by={user.id}"
    )
    return results
