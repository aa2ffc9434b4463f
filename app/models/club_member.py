from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime

from app.database import Base
from app.enums.roles import ClubRole


class ClubMember(Base):
    __tablename__ = "club_members"
    __table_args__ = (
        # Una sola membresía activa por (usuario, club)
        UniqueConstraint("user_id", "club_id", name="uq_club_members_user_club"),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id"), nullable=False, index=True)
    role = Column(Enum(ClubRole), default=ClubRole.MEMBER, nullable=False)
    joined_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="memberships")
    club = relationship("Club", back_populates="members")
