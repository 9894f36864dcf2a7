"""
Identity resolution: turn a password into the owner id its tasks are stored under.

There is no account table. An owner id exists once some task carries it, and a
returning owner is recognised by verifying the password against every distinct
owner id in the store until one matches. Argon2 is slow on purpose, so a cold
resolve costs (number of owners) x (one verify). That is fine for a personal
tool and does not scale to many tenants; MAX_OWNER_SCAN and the scan timeout
make the ceiling explicit instead of hiding it.

Known gap: two first-time resolves of the same new password running at the
same moment both see no match and mint two different owner ids. Nothing here
prevents it.
"""
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol

from ..config import settings
from ..errors import (
    AuthenticationMismatch, CredentialValidationError, OwnerCapacityExceeded, ResolveTimeout,
)
from ..utils.logging import logger, fingerprint
from .hasher import CredentialHasher

@dataclass(frozen=True)
class FreshlyResolved:
    """Identity proven by the password during this call."""
    owner_id: str
    is_new_owner: bool = False

@dataclass(frozen=True)
class CachedBearer:
    """Identity taken from the device cache with no password challenge."""
    owner_id: str

class OwnerSource(Protocol):
    def iter_owner_ids(self) -> Iterable[str]: ...

class IdentityResolver:
    def __init__(self, hasher: CredentialHasher, min_length: int = 4,
                 max_owners: Optional[int] = 1000, timeout_seconds: Optional[float] = 10.0,
                 clock: Callable[[], float] = time.monotonic):
        self.hasher = hasher
        self.min_length = min_length
        self.max_owners = max_owners
        self.timeout_seconds = timeout_seconds
        self._clock = clock

    @classmethod
    def from_settings(cls, hasher: CredentialHasher, s=settings) -> "IdentityResolver":
        return cls(
            hasher,
            min_length=s.MIN_SECRET_LENGTH,
            max_owners=s.MAX_OWNER_SCAN,
            timeout_seconds=s.RESOLVE_TIMEOUT_SECONDS,
        )

    def validate(self, secret: str) -> None:
        if not isinstance(secret, str) or len(secret) < self.min_length:
            raise CredentialValidationError(self.min_length)

    def resolve(self, secret: str, candidates: Iterable[str]) -> FreshlyResolved:
        """
        Return the first candidate that verifies against `secret`, or mint a
        new owner id when none does. Errors raised while iterating
        `candidates` propagate untouched: a failed scan is never a new owner.
        """
        self.validate(secret)
        deadline = None
        if self.timeout_seconds is not None:
            deadline = self._clock() + self.timeout_seconds

        scanned = 0
        for candidate in candidates:
            scanned += 1
            if self.max_owners is not None and scanned > self.max_owners:
                logger.error("owner scan aborted: more than %d owners", self.max_owners)
                raise OwnerCapacityExceeded(f"more than {self.max_owners} owners")
            if deadline is not None and self._clock() > deadline:
                logger.error("owner scan timed out after %d candidates", scanned - 1)
                raise ResolveTimeout(f"scan exceeded {self.timeout_seconds}s")
            if self.hasher.verify(secret, candidate):
                logger.info("resolved existing owner %s after %d candidate(s)", fingerprint(candidate), scanned)
                return FreshlyResolved(owner_id=candidate, is_new_owner=False)

        owner_id = self.hasher.hash(secret)
        logger.info("minted new owner %s (scanned %d)", fingerprint(owner_id), scanned)
        return FreshlyResolved(owner_id=owner_id, is_new_owner=True)

    def resolve_owner(self, secret: str, source: OwnerSource) -> FreshlyResolved:
        # validate before touching the store
        self.validate(secret)
        return self.resolve(secret, source.iter_owner_ids())

    def confirm(self, secret: str, claimed_owner_id: str) -> FreshlyResolved:
        """Check a password against one specific owner id, e.g. the one cached on this device."""
        self.validate(secret)
        if not self.hasher.verify(secret, claimed_owner_id):
            raise AuthenticationMismatch("password does not match claimed owner")
        return FreshlyResolved(owner_id=claimed_owner_id, is_new_owner=False)
