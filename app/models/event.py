from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Boolean,
    ForeignKey,
    Enum,
    Numeric,
    Text,
)
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from app.database import Base


class EventStatus(enum.Enum):
    DRAFT = "DRAFT"  # Creado, todavía no visible
    PUBLISHED = "PUBLISHED"  # Abierto a inscripciones
    ONGOING = "ONGOING"  # En curso, sigue aceptando inscripciones
    COMPLETED = "COMPLETED"  # Terminado
    CANCELLED = "CANCELLED"  # Cancelado (terminal)


class Event(Base):
    __tablename__ = "events"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id"), nullable=False, index=True)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    start_date_time = Column(DateTime, nullable=True)
    end_date_time = Column(DateTime, nullable=True)
    is_public = Column(Boolean, default=True, nullable=False)
    entry_fee_usd = Column(Numeric(10, 2), nullable=True)  # Precio por inscripción
    max_attendees = Column(Integer, nullable=True)
    status = Column(Enum(EventStatus), default=EventStatus.DRAFT, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    club = relationship("Club", back_populates="events")
    organizer = relationship("User")
    entries = relationship(
        "EventEntry", back_populates="event", cascade="all, delete"
    )
    challenges = relationship(
        "Challenge", back_populates="event", cascade="all, delete"
    )
