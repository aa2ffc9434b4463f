"""
Tests del flujo de ingreso a clubs: solicitudes, revisión, ingreso directo y salida
"""
from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from app.crud import membership as membership_crud
from app.enums.roles import ClubRole
from app.models.club_ban import ClubBan
from app.models.club_join_request import ClubJoinRequest, JoinRequestStatus
from app.schemas.membership import ReviewDecision
from app.services import membership as membership_service
from app.services.errors import ConflictError, ForbiddenError, NotFoundError


def _ban(db, club, user, banned_by, permanent=True, expires_at=None):
    club_ban = ClubBan(
        user_id=user.id,
        club_id=club.id,
        banned_by_id=banned_by.id,
        is_permanent=permanent,
        expires_at=expires_at,
    )
    db.add(club_ban)
    db.commit()
    return club_ban


def test_request_join_creates_pending_request(db, club, make_user):
    driver = make_user()

    join_request = membership_service.request_join(db, driver, club.id, "Tengo un GT86")

    assert join_request.status == JoinRequestStatus.PENDING
    assert join_request.message == "Tengo un GT86"
    assert membership_crud.get_membership(db, driver.id, club.id) is None


def test_second_pending_request_is_conflict(db, club, make_user):
    driver = make_user()
    membership_service.request_join(db, driver, club.id)

    with pytest.raises(ConflictError):
        membership_service.request_join(db, driver, club.id)

    assert len(membership_crud.get_pending_join_requests(db, club.id)) == 1


def test_member_cannot_request_join(db, club, make_user, add_member):
    driver = make_user()
    add_member(club, driver)

    with pytest.raises(ConflictError):
        membership_service.request_join(db, driver, club.id)


def test_banned_user_cannot_request_join(db, club, club_admin, make_user):
    driver = make_user()
    _ban(db, club, driver, club_admin)

    with pytest.raises(ForbiddenError):
        membership_service.request_join(db, driver, club.id)


def test_expired_ban_does_not_block_request(db, club, club_admin, make_user):
    driver = make_user()
    _ban(
        db,
        club,
        driver,
        club_admin,
        permanent=False,
        expires_at=datetime.utcnow() - timedelta(minutes=1),
    )

    join_request = membership_service.request_join(db, driver, club.id)
    assert join_request.status == JoinRequestStatus.PENDING


def test_storage_rejects_two_pending_requests(db, club, make_user):
    driver = make_user()
    db.add(ClubJoinRequest(user_id=driver.id, club_id=club.id))
    db.commit()

    db.add(ClubJoinRequest(user_id=driver.id, club_id=club.id))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_storage_keeps_history_of_processed_requests(db, club, make_user):
    driver = make_user()
    db.add(
        ClubJoinRequest(
            user_id=driver.id, club_id=club.id, status=JoinRequestStatus.REJECTED
        )
    )
    db.add(
        ClubJoinRequest(
            user_id=driver.id, club_id=club.id, status=JoinRequestStatus.REJECTED
        )
    )
    db.add(ClubJoinRequest(user_id=driver.id, club_id=club.id))
    db.commit()

    assert db.query(ClubJoinRequest).filter_by(user_id=driver.id).count() == 3


def test_approve_creates_membership_atomically(db, club, club_admin, make_user):
    driver = make_user()
    join_request = membership_service.request_join(db, driver, club.id)

    reviewed = membership_service.review_join_request(
        db, club_admin, join_request.id, ReviewDecision.APPROVE
    )

    assert reviewed.status == JoinRequestStatus.APPROVED
    assert reviewed.reviewed_by_id == club_admin.id
    assert reviewed.reviewed_at is not None
    membership = membership_crud.get_membership(db, driver.id, club.id)
    assert membership is not None
    assert membership.role == ClubRole.MEMBER


def test_reject_leaves_no_membership(db, club, club_admin, make_user):
    driver = make_user()
    join_request = membership_service.request_join(db, driver, club.id)

    reviewed = membership_service.review_join_request(
        db, club_admin, join_request.id, ReviewDecision.REJECT
    )

    assert reviewed.status == JoinRequestStatus.REJECTED
    assert membership_crud.get_membership(db, driver.id, club.id) is None

    # Después de un rechazo se puede volver a pedir
    again = membership_service.request_join(db, driver, club.id)
    assert again.status == JoinRequestStatus.PENDING


def test_moderator_cannot_review(db, club, make_user, add_member):
    moderator = make_user()
    add_member(club, moderator, ClubRole.MODERATOR)
    driver = make_user()
    join_request = membership_service.request_join(db, driver, club.id)

    with pytest.raises(ForbiddenError):
        membership_service.review_join_request(
            db, moderator, join_request.id, ReviewDecision.APPROVE
        )

    db.refresh(join_request)
    assert join_request.status == JoinRequestStatus.PENDING
    assert membership_crud.get_membership(db, driver.id, club.id) is None


def test_reviewing_processed_request_is_not_found(db, club, club_admin, make_user):
    driver = make_user()
    join_request = membership_service.request_join(db, driver, club.id)
    membership_service.review_join_request(
        db, club_admin, join_request.id, ReviewDecision.REJECT
    )

    with pytest.raises(NotFoundError):
        membership_service.review_join_request(
            db, club_admin, join_request.id, ReviewDecision.APPROVE
        )


def test_reviewing_missing_request_is_not_found(db, club_admin):
    with pytest.raises(NotFoundError):
        membership_service.review_join_request(
            db, club_admin, 999, ReviewDecision.APPROVE
        )


def test_approve_fails_for_banned_requester(db, club, club_admin, make_user):
    driver = make_user()
    join_request = ClubJoinRequest(user_id=driver.id, club_id=club.id)
    db.add(join_request)
    db.commit()
    _ban(db, club, driver, club_admin)

    with pytest.raises(ForbiddenError):
        membership_service.review_join_request(
            db, club_admin, join_request.id, ReviewDecision.APPROVE
        )

    assert membership_crud.get_membership(db, driver.id, club.id) is None


def test_cancel_join_request(db, club, make_user):
    driver = make_user()
    membership_service.request_join(db, driver, club.id)

    membership_service.cancel_join_request(db, driver, club.id)

    assert membership_crud.get_pending_join_request(db, driver.id, club.id) is None
    with pytest.raises(NotFoundError):
        membership_service.cancel_join_request(db, driver, club.id)


def test_join_public_club_directly(db, club, make_user):
    driver = make_user()

    membership = membership_service.join_club(db, driver, club.id)

    assert membership.role == ClubRole.MEMBER
    backing = (
        db.query(ClubJoinRequest)
        .filter_by(user_id=driver.id, club_id=club.id)
        .one()
    )
    assert backing.status == JoinRequestStatus.APPROVED

    with pytest.raises(ConflictError):
        membership_service.join_club(db, driver, club.id)


def test_cannot_join_private_club_directly(db, make_club, club_admin, make_user):
    private_club = make_club(club_admin, is_private=True)
    driver = make_user()

    with pytest.raises(ForbiddenError):
        membership_service.join_club(db, driver, private_club.id)

    with pytest.raises(ForbiddenError):
        membership_service.get_club_for_reader(db, driver, private_club.id)


def test_leave_club(db, club, club_admin, make_user, add_member):
    driver = make_user()
    add_member(club, driver)

    membership_service.leave_club(db, driver, club.id)
    assert membership_crud.get_membership(db, driver.id, club.id) is None

    with pytest.raises(NotFoundError):
        membership_service.leave_club(db, driver, club.id)

    with pytest.raises(ForbiddenError):
        membership_service.leave_club(db, club_admin, club.id)


def test_list_join_requests_requires_view_permission(db, club, club_admin, make_user):
    driver = make_user()
    outsider = make_user()
    membership_service.request_join(db, driver, club.id)

    pending = membership_service.list_join_requests(db, club_admin, club.id)
    assert [r.user_id for r in pending] == [driver.id]

    with pytest.raises(ForbiddenError):
        membership_service.list_join_requests(db, outsider, club.id)
