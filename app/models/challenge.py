from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Enum,
    Numeric,
    Text,
)
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from app.database import Base


class ChallengeStatus(enum.Enum):
    PENDING = "PENDING"  # Creado junto al evento, todavía no abierto
    ACTIVE = "ACTIVE"  # Acepta inscripciones
    COMPLETED = "COMPLETED"  # Liquidado, ganadores y pagos fijados
    CANCELLED = "CANCELLED"


class Challenge(Base):
    __tablename__ = "challenges"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    entry_fee_usd = Column(Numeric(10, 2), nullable=True)
    bonus_pool_percent_of_event_fees = Column(Numeric(5, 2), default=0, nullable=False)
    status = Column(
        Enum(ChallengeStatus), default=ChallengeStatus.PENDING, nullable=False
    )

    # Liquidación: se escribe una sola vez, todo junto, al completar el challenge
    first_place_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    second_place_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    third_place_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    bonus_pool_usd = Column(Numeric(10, 2), nullable=True)
    first_place_payout_usd = Column(Numeric(10, 2), nullable=True)
    second_place_payout_usd = Column(Numeric(10, 2), nullable=True)
    third_place_payout_usd = Column(Numeric(10, 2), nullable=True)
    payouts_released_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    event = relationship("Event", back_populates="challenges")
    entries = relationship(
        "ChallengeEntry", back_populates="challenge", cascade="all, delete"
    )
    first_place_user = relationship("User", foreign_keys=[first_place_user_id])
    second_place_user = relationship("User", foreign_keys=[second_place_user_id])
    third_place_user = relationship("User", foreign_keys=[third_place_user_id])
