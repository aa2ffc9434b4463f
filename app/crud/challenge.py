from sqlalchemy import and_
from sqlalchemy.orm import Session
from typing import List, Optional

from app.models.challenge import Challenge
from app.models.challenge_entry import ChallengeEntry


def get_challenge(db: Session, challenge_id: int) -> Optional[Challenge]:
    return db.query(Challenge).filter(Challenge.id == challenge_id).first()


def get_challenges_by_event(db: Session, event_id: int) -> List[Challenge]:
    return db.query(Challenge).filter(Challenge.event_id == event_id).all()


def get_challenge_entry(
    db: Session, challenge_id: int, user_id: int
) -> Optional[ChallengeEntry]:
    return (
        db.query(ChallengeEntry)
        .filter(
            and_(
                ChallengeEntry.challenge_id == challenge_id,
                ChallengeEntry.user_id == user_id,
            )
        )
        .first()
    )


def count_participants_among(
    db: Session, challenge_id: int, user_ids: List[int]
) -> int:
    """Cuántos de los usuarios dados tienen inscripción en el challenge"""
    return (
        db.query(ChallengeEntry)
        .filter(
            and_(
                ChallengeEntry.challenge_id == challenge_id,
                ChallengeEntry.user_id.in_(user_ids),
            )
        )
        .count()
    )
