from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from app.enums.roles import ClubRole
from app.models.club import Club
from app.models.club_member import ClubMember
from app.schemas.club import ClubCreate

logger = logging.getLogger(__name__)


def get_club(db: Session, club_id: int) -> Optional[Club]:
    return db.query(Club).filter(Club.id == club_id).first()


def get_clubs(db: Session, skip: int = 0, limit: int = 100) -> List[Club]:
    return db.query(Club).offset(skip).limit(limit).all()


def create_club(db: Session, club: ClubCreate, creator_id: int) -> Club:
    """
    Crea el club y la membresía ADMIN del creador en la misma transacción.
    Es la única membresía que no necesita una solicitud aprobada.
    """
    db_club = Club(**club.model_dump(), creator_id=creator_id)
    db.add(db_club)
    db.flush()

    db.add(ClubMember(user_id=creator_id, club_id=db_club.id, role=ClubRole.ADMIN))
    db.commit()
    db.refresh(db_club)
    logger.info(f"Club created: {db_club.id} by user {creator_id}")
    return db_club
