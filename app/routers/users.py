from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.crud import user as user_crud
from app.database import get_db
from app.models.user import User
from app.schemas.user import PermissionsResponse, SiteRoleUpdate, UserResponse
from app.services import membership as membership_service
from app.services.auth import get_current_user
from app.utils.permissions import site_permissions

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/me/permissions", response_model=PermissionsResponse)
def read_my_permissions(
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    snapshot = user_crud.load_user_permissions(db, current_user)
    return PermissionsResponse(
        user_id=snapshot.id,
        site_role=snapshot.site_role,
        site_permissions=sorted(p.value for p in site_permissions(snapshot.site_role)),
        club_memberships=snapshot.club_memberships,
    )


@router.put("/{user_id}/site-role", response_model=UserResponse)
def update_site_role(
    user_id: int,
    payload: SiteRoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # Solo SUPER_ADMIN puede cambiar roles de sitio
    return membership_service.update_site_role(
        db, current_user, user_id, payload.site_role
    )
