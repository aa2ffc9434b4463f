from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Boolean,
    ForeignKey,
    UniqueConstraint,
    or_,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from typing import Optional

from app.database import Base


class ClubBan(Base):
    __tablename__ = "club_bans"
    __table_args__ = (
        UniqueConstraint("user_id", "club_id", name="uq_club_bans_user_club"),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id"), nullable=False, index=True)
    banned_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    reason = Column(String, nullable=True)
    is_permanent = Column(Boolean, default=False, nullable=False)
    # Obligatorio cuando el ban no es permanente
    expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", foreign_keys=[user_id])
    club = relationship("Club")
    banned_by = relationship("User", foreign_keys=[banned_by_id])

    def is_active_at(self, now: Optional[datetime] = None) -> bool:
        """
        Un ban está activo si es permanente o si todavía no expiró.
        Se evalúa siempre al momento de la lectura, nunca se guarda como flag.
        """
        if self.is_permanent:
            return True
        if self.expires_at is None:
            return False
        return self.expires_at > (now or datetime.utcnow())


def active_ban_clause(now: Optional[datetime] = None):
    """Filtro SQL equivalente a ClubBan.is_active_at"""
    return or_(
        ClubBan.is_permanent == True,  # noqa: E712
        ClubBan.expires_at > (now or datetime.utcnow()),
    )
