"""Tests for SessionRecord and SessionState."""

import pytest

from outage_admin.session_auth import SessionRecord, SessionState, SessionStatus


def _record(**overrides) -> SessionRecord:
    values = dict(
        user_id=7,
        employee_id="123456",
        full_name="Test User",
        role="ADMIN",
        work_center_id=3,
        work_center_name="Center A",
        branch_id=10,
        branch_name="Branch X",
        email="t@example.com",
    )
    values.update(overrides)
    return SessionRecord(**values)


def test_claims_round_trip_keeps_every_field():
    record = _record()
    assert SessionRecord.from_claims(record.to_claims()) == record


def test_claims_use_string_subject():
    assert _record().to_claims()["sub"] == "7"


def test_from_claims_with_missing_role():
    claims = _record().to_claims()
    del claims["role"]
    assert SessionRecord.from_claims(claims).role is None


def test_authenticated_state_requires_record():
    with pytest.raises(ValueError):
        SessionState(SessionStatus.AUTHENTICATED)


def test_loading_state_rejects_record():
    with pytest.raises(ValueError):
        SessionState(SessionStatus.LOADING, _record())


def test_state_constructors():
    assert SessionState.loading().status is SessionStatus.LOADING
    assert SessionState.unauthenticated().session is None
    assert SessionState.authenticated(_record()).session.user_id == 7
