from sqlalchemy.orm import Session

from app.crud import club as club_crud
from app.crud import user as user_crud
from app.enums.permissions import ClubPermission, SitePermission
from app.models.club import Club
from app.models.user import User
from app.services.errors import ForbiddenError, NotFoundError
from app.utils.permissions import can_access_club, can_act_club, can_act_site


def get_club_or_404(db: Session, club_id: int) -> Club:
    club = club_crud.get_club(db, club_id)
    if not club:
        raise NotFoundError("Club not found")
    return club


def get_user_or_404(db: Session, user_id: int) -> User:
    user = user_crud.get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def require_club_permission(
    db: Session,
    user: User,
    club_id: int,
    permission: ClubPermission,
    message: str = "Insufficient permissions",
) -> None:
    snapshot = user_crud.load_user_permissions(db, user)
    if not can_act_club(snapshot, club_id, permission):
        raise ForbiddenError(message)


def require_club_access(
    db: Session, user: User, club: Club, message: str = "This club is private"
) -> None:
    """Lectura de un club privado: sólo miembros y admins del sitio"""
    if not can_access_club(user_crud.load_user_permissions(db, user), club):
        raise ForbiddenError(message)


def require_site_permission(
    db: Session,
    user: User,
    permission: SitePermission,
    message: str = "Insufficient permissions",
) -> None:
    snapshot = user_crud.load_user_permissions(db, user)
    if not can_act_site(snapshot, permission):
        raise ForbiddenError(message)
