# tests/test_resolver.py
import itertools
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from taskvault.errors import (
    AuthenticationMismatch, CredentialValidationError, OwnerCapacityExceeded, ResolveTimeout, StoreUnavailable,
)
from taskvault.vault.repository import TaskRepository
from taskvault.vault.resolver import FreshlyResolved, IdentityResolver

@pytest.fixture
def spy(hasher):
    return Mock(wraps=hasher)

def test_empty_store_mints_without_scanning(spy):
    r = IdentityResolver(spy).resolve("abcd", [])
    assert r.is_new_owner
    assert spy.verify.call_count == 0
    assert spy.hash.call_count == 1
    assert spy.verify("abcd", r.owner_id)

@pytest.mark.parametrize("n", [0, 1, 5])
def test_no_match_mints_fresh_owner(resolver, hasher, n):
    others = [hasher.hash(f"other-{i}") for i in range(n)]
    r = resolver.resolve("abcd", others)
    assert r.is_new_owner
    assert r.owner_id not in others
    assert hasher.verify("abcd", r.owner_id)

@pytest.mark.parametrize("position", [0, 2, 4])
def test_existing_owner_found_anywhere(resolver, hasher, position):
    mine = hasher.hash("abcd")
    candidates = [hasher.hash(f"other-{i}") for i in range(4)]
    candidates.insert(position, mine)
    r = resolver.resolve("abcd", candidates)
    assert r == FreshlyResolved(owner_id=mine, is_new_owner=False)

def test_scan_stops_at_first_match(hasher, spy):
    mine = hasher.hash("abcd")
    candidates = [mine] + [hasher.hash(f"other-{i}") for i in range(3)]
    IdentityResolver(spy).resolve("abcd", candidates)
    assert spy.verify.call_count == 1
    assert spy.hash.call_count == 0

def test_resolving_twice_returns_the_stored_hash(resolver, hasher):
    # returning user: same owner id, not a new hash
    stored = hasher.hash("abcd")
    assert resolver.resolve("abcd", [stored]).owner_id == stored
    assert resolver.resolve("abcd", [stored]).owner_id == stored

@pytest.mark.parametrize("secret", ["", "xy", "abc", None])
def test_short_secret_never_reaches_store(spy, secret):
    store = Mock()
    with pytest.raises(CredentialValidationError):
        IdentityResolver(spy, min_length=4).resolve_owner(secret, store)
    assert store.iter_owner_ids.call_count == 0
    assert spy.hash.call_count == 0
    assert spy.verify.call_count == 0

def test_store_failure_mid_scan_is_not_a_new_owner(hasher, spy):
    def flaky():
        yield hasher.hash("someone-else")
        raise StoreUnavailable("distinct_owners")
    store = Mock()
    store.iter_owner_ids.side_effect = flaky
    with pytest.raises(StoreUnavailable):
        IdentityResolver(spy).resolve_owner("abcd", store)
    assert spy.hash.call_count == 0

def test_database_error_during_owner_query(spy):
    db = Mock()
    db.execute.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
    with pytest.raises(StoreUnavailable):
        IdentityResolver(spy).resolve_owner("abcd", TaskRepository(db))
    db.rollback.assert_called_once()
    assert spy.hash.call_count == 0

def test_owner_cap(hasher, spy):
    candidates = [hasher.hash(f"other-{i}") for i in range(3)]
    with pytest.raises(OwnerCapacityExceeded):
        IdentityResolver(spy, max_owners=2).resolve("abcd", candidates)
    assert spy.hash.call_count == 0

def test_scan_timeout(hasher, spy):
    ticks = itertools.chain([0.0], itertools.repeat(30.0))
    r = IdentityResolver(spy, timeout_seconds=5, clock=lambda: next(ticks))
    with pytest.raises(ResolveTimeout):
        r.resolve("abcd", [hasher.hash("other")])
    assert spy.verify.call_count == 0
    assert spy.hash.call_count == 0

def test_distinct_secrets_get_distinct_owners(resolver):
    a = resolver.resolve("abcd", [])
    b = resolver.resolve("wxyz", [a.owner_id])
    assert b.is_new_owner
    assert a.owner_id != b.owner_id

def test_confirm(resolver, hasher):
    stored = hasher.hash("abcd")
    assert resolver.confirm("abcd", stored).owner_id == stored
    with pytest.raises(AuthenticationMismatch):
        resolver.confirm("wxyz", stored)
