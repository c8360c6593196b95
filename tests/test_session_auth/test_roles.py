"""Tests for Role parsing."""

import pytest

from outage_admin.session_auth import Role


@pytest.mark.parametrize("raw", ["VIEWER", "ADMIN", "MANAGER", "SUPERVISOR", "USER"])
def test_parse_known_roles(raw):
    assert Role.parse(raw).value == raw


@pytest.mark.parametrize("raw", [None, "", "admin", "SUPERUSER", "SUPER_ADMIN", "UNKNOWN", 3])
def test_parse_anything_else_is_unknown(raw):
    assert Role.parse(raw) is Role.UNKNOWN


def test_assignable_excludes_unknown():
    assert Role.UNKNOWN not in Role.assignable()
    assert len(Role.assignable()) == 5
