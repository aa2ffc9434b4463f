from sqlalchemy.orm import Session
from typing import Optional
import logging

from app.enums.roles import SiteRole
from app.models.user import User
from app.models.club_member import ClubMember
from app.schemas.user import MembershipSnapshot, UserWithPermissions

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_external_id(db: Session, external_id: str) -> Optional[User]:
    return db.query(User).filter(User.external_id == external_id).first()


def create_user(
    db: Session,
    external_id: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    site_role: SiteRole = SiteRole.USER,
) -> User:
    db_user = User(
        external_id=external_id, name=name, email=email, site_role=site_role
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"User created: {db_user.id} ({external_id})")
    return db_user


def load_user_permissions(db: Session, user: User) -> UserWithPermissions:
    """Arma el snapshot de permisos leyendo las membresías actuales del usuario"""
    memberships = db.query(ClubMember).filter(ClubMember.user_id == user.id).all()
    return UserWithPermissions(
        id=user.id,
        site_role=user.site_role,
        club_memberships=[
            MembershipSnapshot(club_id=m.club_id, role=m.role) for m in memberships
        ],
    )
