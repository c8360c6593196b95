"""Tests for SessionProvider and AuthorizationDeriver."""

from outage_admin.session_auth import (
    AuthorizationDeriver,
    SessionProvider,
    SessionRecord,
    SessionState,
    SessionStatus,
)


def _session(role="ADMIN", user_id=1) -> SessionRecord:
    return SessionRecord(
        user_id=user_id,
        employee_id="000001",
        full_name="Someone",
        role=role,
        work_center_id=3,
        work_center_name="Center A",
        branch_id=10,
        branch_name="Branch X",
    )


def test_provider_starts_loading_and_delivers_current_state_on_subscribe():
    provider = SessionProvider()
    seen = []
    provider.subscribe(seen.append)
    assert [s.status for s in seen] == [SessionStatus.LOADING]


def test_unsubscribe_stops_notifications():
    provider = SessionProvider()
    seen = []
    unsubscribe = provider.subscribe(seen.append)
    unsubscribe()
    provider.sign_out()
    assert len(seen) == 1


def test_deriver_starts_with_loading_view():
    deriver = AuthorizationDeriver(SessionProvider())
    assert deriver.view.is_loading is True
    assert deriver.recompute_count == 1


def test_loading_to_admin_transition_is_direct():
    provider = SessionProvider()
    deriver = AuthorizationDeriver(provider)

    views = []
    provider.subscribe(lambda _state: views.append(deriver.view))
    views.clear()

    provider.sign_in(_session("ADMIN"))

    assert len(views) == 1
    assert views[0].is_admin is True
    assert views[0].is_loading is False


def test_recomputes_once_per_state_change():
    provider = SessionProvider()
    deriver = AuthorizationDeriver(provider)
    session = _session()

    provider.sign_in(session)
    provider.sign_in(session)
    provider.publish(SessionState.authenticated(session))
    assert deriver.recompute_count == 2

    provider.sign_in(_session(user_id=2))
    assert deriver.recompute_count == 3
    assert deriver.view.user_id == 2


def test_loading_after_session_hides_previous_session():
    provider = SessionProvider()
    deriver = AuthorizationDeriver(provider)
    provider.sign_in(_session("ADMIN"))

    provider.begin_loading()

    assert deriver.view.is_loading is True
    assert deriver.view.is_admin is False
    assert deriver.view.user_work_center_id is None


def test_sign_out_clears_flags_and_scope():
    provider = SessionProvider()
    deriver = AuthorizationDeriver(provider)
    provider.sign_in(_session("MANAGER"))

    provider.sign_out()

    assert deriver.view.is_manager is False
    assert deriver.view.is_loading is False
    assert deriver.view.user_branch_name is None


def test_closed_deriver_keeps_last_view():
    provider = SessionProvider()
    deriver = AuthorizationDeriver(provider)
    provider.sign_in(_session("VIEWER"))
    deriver.close()

    provider.sign_out()

    assert deriver.view.is_viewer is True
