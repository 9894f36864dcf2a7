# tests/test_hasher.py
import pytest
from argon2.exceptions import HashingError

from taskvault.errors import CredentialHashingError

def test_hash_is_salted(hasher):
    h1 = hasher.hash("abcd")
    h2 = hasher.hash("abcd")
    assert h1 != h2
    assert h1.startswith("$argon2id$")
    assert hasher.verify("abcd", h1)
    assert hasher.verify("abcd", h2)

def test_verify_other_secret(hasher):
    assert not hasher.verify("wxyz", hasher.hash("abcd"))

@pytest.mark.parametrize("bad", ["", "not-a-hash", "$argon2id$v=19$garbage", "h\u00e9llo",
                                 "$2b$12$abcdefghijklmnopqrstuuJ6Q5P9Yz1Zb3eVQxQZ0iYxk1z6Hc2u", None, 42])
def test_verify_malformed_hash_is_false(hasher, bad):
    assert hasher.verify("abcd", bad) is False

def test_verify_non_string_secret(hasher):
    assert hasher.verify(None, hasher.hash("abcd")) is False

class _BrokenPrimitive:
    def hash(self, secret):
        raise HashingError("primitive failed")

def test_hash_failure_is_surfaced(hasher, monkeypatch):
    monkeypatch.setattr(hasher, "_ph", _BrokenPrimitive())
    with pytest.raises(CredentialHashingError):
        hasher.hash("abcd")

def test_hash_rejects_empty(hasher):
    with pytest.raises(CredentialHashingError):
        hasher.hash("")
