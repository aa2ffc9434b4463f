from enum import Enum


class SiteRole(str, Enum):
    """Rol del usuario a nivel de todo el sitio"""

    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    USER = "USER"


class ClubRole(str, Enum):
    """Rol del usuario dentro de un club"""

    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"
    MEMBER = "MEMBER"


# Orden jerárquico de roles de club (mayor = más privilegios)
CLUB_ROLE_RANK = {
    ClubRole.MEMBER: 1,
    ClubRole.MODERATOR: 2,
    ClubRole.ADMIN: 3,
}
