# tests/test_security.py

from security import hash_password, verify_password


def test_hash_is_salted_and_verifies() -> None:
    first = hash_password("hunter2")
    second = hash_password("hunter2")

    assert first != "hunter2"
    assert first != second
    assert verify_password("hunter2", first)
    assert verify_password("hunter2", second)


def test_wrong_password_is_rejected() -> None:
    stored = hash_password("hunter2")
    assert not verify_password("hunter3", stored)
    assert not verify_password("", stored)


def test_malformed_hash_fails_closed() -> None:
    assert not verify_password("hunter2", "not-a-hash")
    assert not verify_password("hunter2", "bogus-method$salt$value")
    assert not verify_password("hunter2", "")
    assert not verify_password("hunter2", None)
    assert not verify_password(None, hash_password("hunter2"))
