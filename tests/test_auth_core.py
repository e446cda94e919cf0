import pytest

from pinvent.core.auth import SessionIssuer, hash_password, verify_password
from pinvent.core.errors import InternalError


def test_hash_is_salted_and_verifies():
    first = hash_password("hunter2")
    second = hash_password("hunter2")
    assert first != second
    assert first != "hunter2"
    assert verify_password("hunter2", first)
    assert verify_password("hunter2", second)


def test_verify_returns_false_instead_of_raising():
    hashed = hash_password("hunter2")
    assert verify_password("wrong", hashed) is False
    assert verify_password("hunter2", "not-a-bcrypt-hash") is False
    assert verify_password("", hashed) is False


def test_hash_rejects_empty_password():
    with pytest.raises(InternalError):
        hash_password("")


def test_session_round_trip():
    issuer = SessionIssuer("s3cret")
    token = issuer.issue(42)
    assert issuer.verify(token) == 42


def test_session_rejects_foreign_signature():
    token = SessionIssuer("one-secret").issue(7)
    assert SessionIssuer("other-secret").verify(token) is None


def test_session_rejects_expired_token():
    issuer = SessionIssuer("s3cret", expire_minutes=-1)
    assert issuer.verify(issuer.issue(7)) is None


@pytest.mark.parametrize("token", ["", None, "garbage", "a.b.c"])
def test_session_verify_never_raises(token):
    assert SessionIssuer("s3cret").verify(token) is None


def test_session_issuer_needs_secret():
    with pytest.raises(ValueError):
        SessionIssuer("")
