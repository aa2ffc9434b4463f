import logging
import os

from sqlalchemy.orm import Session

from app.crud import user as user_crud
from app.enums.roles import SiteRole

logger = logging.getLogger(__name__)


def get_initial_super_admin_ids() -> list:
    raw = os.getenv("INITIAL_SUPER_ADMIN_IDS", "")
    return [value.strip() for value in raw.split(",") if value.strip()]


def create_initial_admins(db: Session, external_ids: list = None):
    """
    Asegura que las identidades configuradas tengan rol SUPER_ADMIN.
    Si el usuario ya existe se le sube el rol; si no, se crea.
    """
    if external_ids is None:
        external_ids = get_initial_super_admin_ids()

    if not external_ids:
        logger.info("No initial super admins configured.")
        return

    for external_id in external_ids:
        user = user_crud.get_user_by_external_id(db, external_id)
        if user is None:
            user_crud.create_user(db, external_id=external_id, site_role=SiteRole.SUPER_ADMIN)
            logger.info(f"Super admin created: {external_id}")
        elif user.site_role != SiteRole.SUPER_ADMIN:
            user.site_role = SiteRole.SUPER_ADMIN
            db.commit()
            logger.info(f"Super admin promoted: {external_id}")
