from sqlalchemy import (
    Column,
    Integer,
    DateTime,
    ForeignKey,
    Enum,
    Text,
    Index,
    text,
)
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from app.database import Base


class JoinRequestStatus(enum.Enum):
    PENDING = "PENDING"  # Esperando revisión de un admin del club
    APPROVED = "APPROVED"  # Aprobada, la membresía se creó en la misma transacción
    REJECTED = "REJECTED"  # Rechazada por un admin o anulada por un ban


class ClubJoinRequest(Base):
    __tablename__ = "club_join_requests"
    __table_args__ = (
        # Como máximo una solicitud PENDING por (usuario, club); el historial se conserva
        Index(
            "uq_club_join_requests_pending",
            "user_id",
            "club_id",
            unique=True,
            postgresql_where=text("status = 'PENDING'"),
            sqlite_where=text("status = 'PENDING'"),
        ),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id"), nullable=False, index=True)
    status = Column(
        Enum(JoinRequestStatus), default=JoinRequestStatus.PENDING, nullable=False
    )
    message = Column(Text, nullable=True)
    reviewed_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", foreign_keys=[user_id])
    club = relationship("Club")
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id])
