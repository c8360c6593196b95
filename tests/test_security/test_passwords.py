"""Tests for bcrypt password helpers."""

from outage_admin.security.passwords import hash_password, verify_password


def test_hash_and_verify():
    hashed = hash_password("secret1", rounds=4)
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_malformed_hash_does_not_verify():
    assert not verify_password("secret1", "not-a-bcrypt-hash")
