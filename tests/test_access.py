import pytest

from booking_api.core.access import can_modify, ensure_can_modify
from booking_api.core.errors import AuthorizationError, NotFoundError, NotFoundTreatedAsDenied
from booking_api.schemas.principal import Principal
from booking_api.schemas.reservation import Reservation

RESERVATION = Reservation(id="r1", email="a@x.com", userId="u1", dates=["2025-07-10T00:00:00.000Z"],
                          totalNights=1)


@pytest.mark.parametrize("principal, allowed", [
    (Principal(uid="someone-else", email="a@x.com"), True),      # e-mail match
    (Principal(uid="u1", email="changed@x.com"), True),          # userId match
    (Principal(uid="u1"), True),
    (Principal(uid="u9", email="z@x.com"), False),
    (Principal(uid="u9"), False),
    (Principal(uid="u9", email="z@x.com", admin=True), True),
])
def test_owner_or_admin_may_modify(principal, allowed):
    assert can_modify(principal, RESERVATION) is allowed


def test_rules_accept_raw_documents():
    legacy = {"id": "old", "email": "a@x.com"}
    assert can_modify(Principal(uid="u1", email="a@x.com"), legacy)
    assert not can_modify(Principal(uid="u1", email="b@x.com"), legacy)


def test_missing_email_on_both_sides_is_not_a_match():
    orphan = {"id": "r2", "userId": "u7"}
    assert not can_modify(Principal(uid="u8"), orphan)


def test_denied_principal_gets_authorization_error():
    with pytest.raises(AuthorizationError) as exc:
        ensure_can_modify(Principal(uid="u9", email="z@x.com"), RESERVATION, "r1")
    assert exc.value.status_code == 403


def test_missing_reservation_is_denied_for_regular_users():
    with pytest.raises(NotFoundTreatedAsDenied) as exc:
        ensure_can_modify(Principal(uid="u1", email="a@x.com"), None, "nope")
    assert exc.value.status_code == 403
    # Same wording as a plain denial
    assert exc.value.message == AuthorizationError().message


def test_missing_reservation_is_not_found_for_admins():
    with pytest.raises(NotFoundError):
        ensure_can_modify(Principal(uid="boss", admin=True), None, "nope")


def test_allowed_principal_gets_the_reservation_back():
    assert ensure_can_modify(Principal(uid="u1"), RESERVATION) is RESERVATION
