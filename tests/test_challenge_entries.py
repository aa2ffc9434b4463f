"""
Tests de inscripción a challenges y de su ciclo de vida
"""
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from app.models.challenge import ChallengeStatus
from app.models.challenge_entry import ChallengeEntry
from app.models.event import EventStatus
from app.schemas.challenge import ChallengeCreate
from app.services import events as event_service
from app.services import ledger
from app.services.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    PreconditionFailedError,
)


def test_challenge_entry_requires_event_entry(
    db, club, make_event, make_challenge, make_user, enter_event
):
    event = make_event(club)
    challenge = make_challenge(event)
    driver = make_user()

    with pytest.raises(PreconditionFailedError) as exc_info:
        ledger.register_challenge_entry(db, driver, challenge.id)
    assert exc_info.value.kind == "PreconditionFailed"
    assert exc_info.value.status_code == 403

    enter_event(event, driver)
    entry = ledger.register_challenge_entry(db, driver, challenge.id)
    assert entry.challenge_id == challenge.id


def test_duplicate_challenge_entry_is_conflict(
    db, club, make_event, make_challenge, make_user, enter_event
):
    event = make_event(club)
    challenge = make_challenge(event)
    driver = make_user()
    enter_event(event, driver)
    ledger.register_challenge_entry(db, driver, challenge.id)

    with pytest.raises(ConflictError):
        ledger.register_challenge_entry(db, driver, challenge.id)

    assert db.query(ChallengeEntry).filter_by(challenge_id=challenge.id).count() == 1


@pytest.mark.parametrize(
    "status",
    [ChallengeStatus.PENDING, ChallengeStatus.COMPLETED, ChallengeStatus.CANCELLED],
)
def test_inactive_challenge_rejects_entries(
    db, club, make_event, make_challenge, make_user, enter_event, status
):
    event = make_event(club)
    challenge = make_challenge(event, status=status)
    driver = make_user()
    enter_event(event, driver)

    with pytest.raises(BadRequestError):
        ledger.register_challenge_entry(db, driver, challenge.id)


def test_paid_challenge_gets_payment_reference(
    db, club, make_event, make_challenge, make_user, enter_event
):
    event = make_event(club)
    challenge = make_challenge(event, entry_fee_usd="15.00")
    driver = make_user()
    enter_event(event, driver)
    gateway = MagicMock()
    gateway.create_payment_reference.return_value = "pi_challenge_test"

    entry = ledger.register_challenge_entry(db, driver, challenge.id, gateway=gateway)

    assert entry.payment_reference == "pi_challenge_test"
    kind, amount, _ = gateway.create_payment_reference.call_args[0]
    assert kind == "challenge"
    assert amount == Decimal("15.00")


def test_create_challenge(db, club, club_admin, make_event):
    event = make_event(club)

    challenge = event_service.create_challenge(
        db,
        club_admin,
        ChallengeCreate(
            event_id=event.id,
            title="Slalom",
            bonus_pool_percent_of_event_fees=Decimal("10"),
        ),
    )

    assert challenge.status == ChallengeStatus.PENDING
    assert challenge.bonus_pool_percent_of_event_fees == Decimal("10")


def test_cannot_add_challenge_to_finished_event(db, club, club_admin, make_event):
    event = make_event(club, status=EventStatus.COMPLETED)

    with pytest.raises(InvalidStateError):
        event_service.create_challenge(
            db, club_admin, ChallengeCreate(event_id=event.id, title="Tarde")
        )


def test_member_cannot_create_challenge(db, club, make_event, make_user, add_member):
    event = make_event(club)
    driver = make_user()
    add_member(club, driver)

    with pytest.raises(ForbiddenError):
        event_service.create_challenge(
            db, driver, ChallengeCreate(event_id=event.id, title="Pirata")
        )


def test_challenge_transitions(db, club, club_admin, make_event, make_challenge):
    event = make_event(club)
    challenge = make_challenge(event, status=ChallengeStatus.PENDING)

    active = event_service.transition_challenge(
        db, club_admin, challenge.id, ChallengeStatus.ACTIVE
    )
    assert active.status == ChallengeStatus.ACTIVE

    with pytest.raises(InvalidStateError):
        event_service.transition_challenge(
            db, club_admin, challenge.id, ChallengeStatus.PENDING
        )

    # COMPLETED sólo se alcanza liquidando
    with pytest.raises(InvalidStateError):
        event_service.transition_challenge(
            db, club_admin, challenge.id, ChallengeStatus.COMPLETED
        )

    cancelled = event_service.transition_challenge(
        db, club_admin, challenge.id, ChallengeStatus.CANCELLED
    )
    assert cancelled.status == ChallengeStatus.CANCELLED
