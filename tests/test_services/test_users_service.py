"""User administration service tests."""
from __future__ import annotations

from outage_admin.models.user import User, UserStatus
from outage_admin.schemas.user import CreateUserIn, UpdateUserIn
from outage_admin.security.passwords import verify_password
from outage_admin.services import users as service
from outage_admin.session_auth import Role


def _new_user(seed, **overrides) -> CreateUserIn:
    values = dict(
        password="hunter22",
        full_name="New Person",
        employee_id="300001",
        email="new@example.com",
        work_center_id=seed.center_a.id,
        branch_id=seed.branch_y.id,
        role="SUPERVISOR",
    )
    values.update(overrides)
    return CreateUserIn(**values)


def test_create_user_hashes_password(db_session, seed):
    result = service.create_user(db_session, _new_user(seed), rounds=4)

    assert result.success is True
    assert result.data["employee_id"] == "300001"
    assert "password_hash" not in result.data
    stored = db_session.get(User, result.data["id"])
    assert stored.password_hash != "hunter22"
    assert verify_password("hunter22", stored.password_hash)


def test_create_user_duplicate_employee_id(db_session, seed):
    result = service.create_user(db_session, _new_user(seed, employee_id="100001"), rounds=4)

    assert result.success is False
    assert result.message == "This Employee ID is already in use"


def test_list_users_search_and_paging(db_session, seed):
    everyone = service.list_users(db_session, page=1, page_size=4)
    assert everyone.total_count == 6
    assert everyone.total_pages == 2
    assert len(everyone.users) == 4

    found = service.list_users(db_session, search="other")
    assert [u.employee_id for u in found.users] == ["200001"]
    assert found.users[0].work_center_name == "Center B"
    assert found.users[0].branch_name == "Branch Z Office"

    by_id = service.list_users(db_session, search="10000")
    assert by_id.total_count == 5


def test_list_users_by_work_center(db_session, seed):
    result = service.list_users(db_session, work_center_id=seed.center_b.id)
    assert result.total_count == 1


def test_update_role_and_name(db_session, seed):
    user = seed.users["VIEWER"]

    assert service.update_user_role(db_session, user.id, "MANAGER").success
    assert service.update_user_name(db_session, user.id, "Renamed Person").success

    refreshed = service.get_user(db_session, user.id)
    assert refreshed.role == "MANAGER"
    assert refreshed.full_name == "Renamed Person"


def test_update_missing_user(db_session, seed):
    result = service.update_user_role(db_session, 9999, "ADMIN")
    assert result.success is False
    assert result.message == "Failed to update user role"


def test_delete_user(db_session, seed):
    user_id = seed.users["VIEWER"].id
    assert service.delete_user(db_session, user_id).success is True
    assert service.get_user(db_session, user_id) is None
    assert service.delete_user(db_session, user_id).success is False


def test_lookups(db_session, seed):
    assert service.get_user_by_employee_id(db_session, "200001").full_name == "Other Center User"
    assert service.employee_id_exists(db_session, "100001")
    assert not service.employee_id_exists(db_session, "100001", exclude_id=seed.users["ADMIN"].id)
    assert len(service.users_by_work_center(db_session, seed.center_a.id)) == 5
    assert len(service.users_by_branch(db_session, seed.branch_z.id)) == 1
    assert [u.employee_id for u in service.users_by_role(db_session, Role.USER)] == ["200001", "100004"]


def test_update_user_full_edit(db_session, seed):
    user = seed.users["USER"]
    payload = UpdateUserIn(
        full_name="Moved Person",
        employee_id="100004",
        email="moved@example.com",
        work_center_id=seed.center_b.id,
        branch_id=seed.branch_z.id,
        role="SUPERVISOR",
        status="INACTIVE",
        password="newpass1",
    )

    result = service.update_user(db_session, user.id, payload, rounds=4)

    assert result.success is True
    refreshed = service.get_user(db_session, user.id)
    assert refreshed.work_center.name == "Center B"
    assert refreshed.role == "SUPERVISOR"
    assert refreshed.status is UserStatus.INACTIVE
    assert verify_password("newpass1", refreshed.password_hash)


def test_update_user_keeps_password_when_blank(db_session, seed):
    user = seed.users["VIEWER"]
    payload = UpdateUserIn(
        full_name="Viewer Person",
        employee_id="100005",
        work_center_id=seed.center_a.id,
        branch_id=seed.branch_x.id,
        role="VIEWER",
    )

    assert service.update_user(db_session, user.id, payload, rounds=4).success
    assert verify_password("secret1", service.get_user(db_session, user.id).password_hash)


def test_update_user_rejects_taken_employee_id(db_session, seed):
    payload = UpdateUserIn(
        full_name="Viewer Person",
        employee_id="100001",
        work_center_id=seed.center_a.id,
        branch_id=seed.branch_x.id,
        role="VIEWER",
    )

    result = service.update_user(db_session, seed.users["VIEWER"].id, payload)

    assert result.success is False
    assert result.message == "This Employee ID is already in use"
