"""
Configuración compartida para tests pytest
"""
import itertools
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db

# Importar todos los modelos para que SQLAlchemy pueda resolver las relaciones
from app.enums.roles import ClubRole, SiteRole
from app.models.user import User
from app.models.club import Club
from app.models.club_member import ClubMember
from app.models.club_join_request import ClubJoinRequest
from app.models.club_ban import ClubBan
from app.models.event import Event, EventStatus
from app.models.challenge import Challenge, ChallengeStatus
from app.models.event_entry import EventEntry
from app.models.challenge_entry import ChallengeEntry


# Base de datos en memoria para tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# pysqlite no maneja bien los SAVEPOINT por sí solo: BEGIN explícito
@event.listens_for(engine, "connect")
def _disable_pysqlite_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """Crear base de datos de test y limpiarla después"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def override_get_db(db):
    """Override de get_db para tests"""
    def _get_db():
        try:
            yield db
        finally:
            pass
    return _get_db


_ids = itertools.count(1)


@pytest.fixture
def make_user(db):
    """Factory de usuarios"""
    def _make_user(site_role=SiteRole.USER, name=None):
        n = next(_ids)
        user = User(
            external_id=f"ext-{n}",
            name=name or f"Driver {n}",
            email=f"driver{n}@example.com",
            site_role=site_role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_club(db):
    """Factory de clubs: el creador queda como ADMIN"""
    def _make_club(creator, is_private=False, name="Midnight Runners"):
        club = Club(name=name, is_private=is_private, creator_id=creator.id)
        db.add(club)
        db.flush()
        db.add(ClubMember(user_id=creator.id, club_id=club.id, role=ClubRole.ADMIN))
        db.commit()
        db.refresh(club)
        return club
    return _make_club


@pytest.fixture
def add_member(db):
    def _add_member(club, user, role=ClubRole.MEMBER):
        membership = ClubMember(user_id=user.id, club_id=club.id, role=role)
        db.add(membership)
        db.commit()
        db.refresh(membership)
        return membership
    return _add_member


@pytest.fixture
def make_event(db):
    def _make_event(
        club,
        organizer=None,
        entry_fee_usd=None,
        status=EventStatus.PUBLISHED,
        is_public=True,
        max_attendees=None,
    ):
        event = Event(
            club_id=club.id,
            organizer_id=(organizer or club.creator).id,
            title="Track Day",
            entry_fee_usd=Decimal(entry_fee_usd) if entry_fee_usd is not None else None,
            status=status,
            is_public=is_public,
            max_attendees=max_attendees,
        )
        db.add(event)
        db.commit()
        db.refresh(event)
        return event
    return _make_event


@pytest.fixture
def make_challenge(db):
    def _make_challenge(
        event,
        bonus_pool_percent="0",
        entry_fee_usd=None,
        status=ChallengeStatus.ACTIVE,
    ):
        challenge = Challenge(
            event_id=event.id,
            creator_id=event.organizer_id,
            title="Quarter Mile",
            entry_fee_usd=Decimal(entry_fee_usd) if entry_fee_usd is not None else None,
            bonus_pool_percent_of_event_fees=Decimal(bonus_pool_percent),
            status=status,
        )
        db.add(challenge)
        db.commit()
        db.refresh(challenge)
        return challenge
    return _make_challenge


@pytest.fixture
def enter_event(db):
    """Inscripción directa, sin pasar por las validaciones del servicio"""
    def _enter_event(event, user):
        entry = EventEntry(event_id=event.id, user_id=user.id)
        db.add(entry)
        db.commit()
        return entry
    return _enter_event


@pytest.fixture
def enter_challenge(db):
    def _enter_challenge(challenge, user):
        entry = ChallengeEntry(challenge_id=challenge.id, user_id=user.id)
        db.add(entry)
        db.commit()
        return entry
    return _enter_challenge


@pytest.fixture
def club_admin(make_user):
    return make_user()


@pytest.fixture
def club(make_club, club_admin):
    return make_club(club_admin)
