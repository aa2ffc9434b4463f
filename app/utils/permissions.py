"""
Registro de roles y resolución de permisos.

Dos niveles independientes: permisos de sitio (según User.site_role) y permisos
de club (según el rol de la membresía en ese club). Todo lo de este módulo es
puro: no toca la base de datos ni modifica estado.
"""
from typing import FrozenSet, Optional

from app.enums.permissions import ClubPermission, SitePermission
from app.enums.roles import ClubRole, SiteRole
from app.schemas.user import UserWithPermissions

SITE_ROLE_PERMISSIONS = {
    SiteRole.SUPER_ADMIN: frozenset(SitePermission),
    SiteRole.ADMIN: frozenset(
        {
            SitePermission.USERS_READ,
            SitePermission.USERS_UPDATE,
            SitePermission.USERS_BAN,
            SitePermission.CLUBS_READ_ALL,
            SitePermission.CLUBS_MODERATE_ANY,
            SitePermission.CONTENT_MODERATE_ALL,
            SitePermission.CONTENT_DELETE_ANY,
            SitePermission.CONTENT_REPORT_REVIEW,
            SitePermission.BILLING_READ,
        }
    ),
    SiteRole.USER: frozenset({SitePermission.CLUBS_CREATE}),
}

CLUB_ROLE_PERMISSIONS = {
    ClubRole.ADMIN: frozenset(ClubPermission),
    ClubRole.MODERATOR: frozenset(
        {
            ClubPermission.CLUB_READ,
            ClubPermission.MEMBERS_VIEW_LIST,
            ClubPermission.POSTS_CREATE,
            ClubPermission.POSTS_UPDATE_OWN,
            ClubPermission.POSTS_DELETE_OWN,
            ClubPermission.POSTS_MODERATE,
            ClubPermission.EVENTS_CREATE,
            ClubPermission.EVENTS_UPDATE_OWN,
            ClubPermission.EVENTS_DELETE_OWN,
            ClubPermission.CHALLENGES_CREATE,
            ClubPermission.CHALLENGES_UPDATE_OWN,
            ClubPermission.CHALLENGES_DELETE_OWN,
            ClubPermission.ANALYTICS_VIEW,
        }
    ),
    ClubRole.MEMBER: frozenset(
        {
            ClubPermission.CLUB_READ,
            ClubPermission.POSTS_CREATE,
            ClubPermission.POSTS_UPDATE_OWN,
            ClubPermission.POSTS_DELETE_OWN,
            ClubPermission.EVENTS_CREATE,
            ClubPermission.EVENTS_UPDATE_OWN,
            ClubPermission.EVENTS_DELETE_OWN,
            ClubPermission.CHALLENGES_CREATE,
            ClubPermission.CHALLENGES_UPDATE_OWN,
            ClubPermission.CHALLENGES_DELETE_OWN,
        }
    ),
}

SITE_ADMIN_ROLES = frozenset({SiteRole.SUPER_ADMIN, SiteRole.ADMIN})


def site_permissions(role) -> FrozenSet[SitePermission]:
    """Permisos de un rol de sitio. Un rol desconocido no tiene permisos."""
    return SITE_ROLE_PERMISSIONS.get(role, frozenset())


def club_permissions(role) -> FrozenSet[ClubPermission]:
    """Permisos de un rol de club. Un rol desconocido no tiene permisos."""
    return CLUB_ROLE_PERMISSIONS.get(role, frozenset())


def is_site_admin(user: UserWithPermissions) -> bool:
    return user.site_role in SITE_ADMIN_ROLES


def get_club_role(user: UserWithPermissions, club_id: int) -> Optional[ClubRole]:
    for membership in user.club_memberships:
        if membership.club_id == club_id:
            return membership.role
    return None


def can_act_site(user: UserWithPermissions, permission: SitePermission) -> bool:
    return permission in site_permissions(user.site_role)


def can_act_club(
    user: UserWithPermissions, club_id: int, permission: ClubPermission
) -> bool:
    # Los admins del sitio tienen todos los permisos en todos los clubs
    if is_site_admin(user):
        return True

    role = get_club_role(user, club_id)
    if role is None:
        return False

    return permission in club_permissions(role)


def can_access_club(user: UserWithPermissions, club) -> bool:
    """
    Acceso de lectura a un club.

    Args:
        user: Snapshot de permisos del usuario
        club: Cualquier objeto con `id` e `is_private` (modelo Club o schema)
    """
    if is_site_admin(user):
        return True

    if not club.is_private:
        return True

    return get_club_role(user, club.id) is not None
