"""
Tests de liquidación de challenges: pozo de premios, reparto 50/30/20 y
completado de una sola vez
"""
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from app.enums.roles import ClubRole
from app.models.challenge import Challenge, ChallengeStatus
from app.services import settlement
from app.services.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidStateError,
)


@pytest.fixture
def paid_challenge(club, make_event, make_challenge, make_user, enter_event, enter_challenge):
    """Evento de $100 con 10 inscriptos y un challenge con 25% del recaudado"""
    event = make_event(club, entry_fee_usd="100.00")
    drivers = [make_user() for _ in range(10)]
    for driver in drivers:
        enter_event(event, driver)

    challenge = make_challenge(event, bonus_pool_percent="25")
    for driver in drivers[:3]:
        enter_challenge(challenge, driver)
    return challenge, drivers


def test_bonus_pool_is_percent_of_event_fees(db, paid_challenge):
    challenge, _ = paid_challenge

    assert settlement.compute_challenge_bonus_pool(db, challenge) == Decimal("250.00")


def test_bonus_pool_is_recomputed_from_current_entries(db, paid_challenge, make_user, enter_event):
    challenge, _ = paid_challenge
    enter_event(challenge.event, make_user())

    assert settlement.compute_challenge_bonus_pool(db, challenge) == Decimal("275.00")


def test_zero_percent_gives_empty_pool(db, club, make_event, make_challenge, make_user, enter_event):
    event = make_event(club, entry_fee_usd="100.00")
    enter_event(event, make_user())
    challenge = make_challenge(event, bonus_pool_percent="0")

    assert settlement.compute_challenge_bonus_pool(db, challenge) == Decimal("0.00")
    assert settlement.split_bonus_pool(Decimal("0.00")) == settlement.PayoutSplit(
        Decimal("0.00"), Decimal("0.00"), Decimal("0.00")
    )


@pytest.mark.parametrize(
    "pool, expected",
    [
        ("250.00", ("125.00", "75.00", "50.00")),
        ("0.01", ("0.01", "0.00", "0.00")),
        ("33.33", ("16.67", "10.00", "6.66")),
        ("99.99", ("50.00", "30.00", "19.99")),
    ],
)
def test_split_always_sums_to_pool(pool, expected):
    split = settlement.split_bonus_pool(Decimal(pool))

    assert (split.first, split.second, split.third) == tuple(Decimal(v) for v in expected)
    assert split.first + split.second + split.third == Decimal(pool)


def test_complete_challenge_records_settlement(db, club_admin, paid_challenge):
    challenge, drivers = paid_challenge
    gateway = MagicMock()

    result = settlement.complete_challenge(
        db,
        club_admin,
        challenge.id,
        drivers[0].id,
        drivers[1].id,
        drivers[2].id,
        gateway=gateway,
    )

    assert result.bonus_pool == Decimal("250.00")
    assert result.payouts == settlement.PayoutSplit(
        Decimal("125.00"), Decimal("75.00"), Decimal("50.00")
    )

    db.refresh(challenge)
    assert challenge.status == ChallengeStatus.COMPLETED
    assert challenge.first_place_user_id == drivers[0].id
    assert challenge.second_place_user_id == drivers[1].id
    assert challenge.third_place_user_id == drivers[2].id
    assert challenge.payouts_released_at is not None
    assert challenge.first_place_payout_usd == Decimal("125.00")
    assert challenge.second_place_payout_usd == Decimal("75.00")
    assert challenge.third_place_payout_usd == Decimal("50.00")

    gateway.release_payouts.assert_called_once_with(
        challenge.id,
        {
            drivers[0].id: Decimal("125.00"),
            drivers[1].id: Decimal("75.00"),
            drivers[2].id: Decimal("50.00"),
        },
    )


def test_second_completion_is_conflict_and_changes_nothing(db, club_admin, paid_challenge):
    challenge, drivers = paid_challenge
    gateway = MagicMock()
    settlement.complete_challenge(
        db, club_admin, challenge.id, drivers[0].id, drivers[1].id, drivers[2].id,
        gateway=gateway,
    )
    db.refresh(challenge)
    released_at = challenge.payouts_released_at

    with pytest.raises(ConflictError):
        settlement.complete_challenge(
            db, club_admin, challenge.id, drivers[2].id, drivers[1].id, drivers[0].id,
            gateway=gateway,
        )

    db.refresh(challenge)
    assert challenge.first_place_user_id == drivers[0].id
    assert challenge.first_place_payout_usd == Decimal("125.00")
    assert challenge.payouts_released_at == released_at
    assert gateway.release_payouts.call_count == 1


def test_lost_compare_and_set_is_conflict(db, club_admin, paid_challenge, monkeypatch):
    challenge, drivers = paid_challenge

    # Otra transacción completó el challenge después de nuestra lectura
    def _settle_concurrently(*args, **kwargs):
        db.query(Challenge).filter(Challenge.id == challenge.id).update(
            {Challenge.status: ChallengeStatus.COMPLETED}, synchronize_session=False
        )
        return Decimal("250.00")

    monkeypatch.setattr(
        settlement, "compute_challenge_bonus_pool", _settle_concurrently
    )
    gateway = MagicMock()

    with pytest.raises(ConflictError):
        settlement.complete_challenge(
            db, club_admin, challenge.id, drivers[0].id, drivers[1].id,
            drivers[2].id, gateway=gateway,
        )

    gateway.release_payouts.assert_not_called()


def test_completion_requires_validate_permission(db, club, paid_challenge, make_user, add_member):
    challenge, drivers = paid_challenge
    moderator = make_user()
    add_member(club, moderator, ClubRole.MODERATOR)

    with pytest.raises(ForbiddenError):
        settlement.complete_challenge(
            db, moderator, challenge.id, drivers[0].id, drivers[1].id, drivers[2].id
        )

    db.refresh(challenge)
    assert challenge.status == ChallengeStatus.ACTIVE
    assert challenge.first_place_user_id is None


def test_completion_requires_active_challenge(db, club, club_admin, make_event, make_challenge):
    event = make_event(club)
    challenge = make_challenge(event, status=ChallengeStatus.PENDING)

    with pytest.raises(InvalidStateError):
        settlement.complete_challenge(db, club_admin, challenge.id, 1, 2, 3)


def test_winners_must_be_distinct(db, club_admin, paid_challenge):
    challenge, drivers = paid_challenge

    with pytest.raises(BadRequestError):
        settlement.complete_challenge(
            db, club_admin, challenge.id, drivers[0].id, drivers[0].id, drivers[1].id
        )


def test_winners_must_be_participants(db, club_admin, paid_challenge):
    challenge, drivers = paid_challenge

    # drivers[5] está inscripto al evento pero no al challenge
    with pytest.raises(BadRequestError):
        settlement.complete_challenge(
            db, club_admin, challenge.id, drivers[0].id, drivers[1].id, drivers[5].id
        )

    db.refresh(challenge)
    assert challenge.status == ChallengeStatus.ACTIVE


def test_payout_failure_does_not_undo_settlement(db, club_admin, paid_challenge):
    challenge, drivers = paid_challenge
    gateway = MagicMock()
    gateway.release_payouts.side_effect = RuntimeError("provider down")

    result = settlement.complete_challenge(
        db, club_admin, challenge.id, drivers[0].id, drivers[1].id, drivers[2].id,
        gateway=gateway,
    )

    assert result.challenge.status == ChallengeStatus.COMPLETED
    recorded = settlement.get_settlement(db, challenge.id)
    assert recorded.bonus_pool == Decimal("250.00")
    assert recorded.payouts.third == Decimal("50.00")


def test_settlement_of_unsettled_challenge_is_invalid_state(db, paid_challenge):
    challenge, _ = paid_challenge

    with pytest.raises(InvalidStateError):
        settlement.get_settlement(db, challenge.id)
