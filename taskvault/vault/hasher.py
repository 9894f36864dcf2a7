# taskvault/vault/hasher.py
from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError
from argon2.low_level import Type

from ..config import settings
from ..errors import CredentialHashingError

class CredentialHasher:
    """
    Salted argon2id hashing for owner passwords.
    The encoded hash embeds salt and cost, so hashing the same password twice
    gives two different strings and matching has to go through verify().
    """

    def __init__(self, time_cost: int = 2, memory_cost: int = 102400,
                 parallelism: int = 8, hash_len: int = 32):
        self._ph = PasswordHasher(
            time_cost=time_cost, memory_cost=memory_cost, parallelism=parallelism,
            hash_len=hash_len, type=Type.ID,
        )

    @classmethod
    def from_settings(cls, s=settings) -> "CredentialHasher":
        return cls(
            time_cost=s.ARGON2_TIME_COST,
            memory_cost=s.ARGON2_MEMORY_COST,
            parallelism=s.ARGON2_PARALLELISM,
            hash_len=s.ARGON2_HASH_LEN,
        )

    def hash(self, secret: str) -> str:
        if not isinstance(secret, str) or not secret:
            raise CredentialHashingError("empty or non-string secret")
        try:
            return self._ph.hash(secret)
        except HashingError as e:
            raise CredentialHashingError(str(e)) from e

    def verify(self, secret: str, hashed: str) -> bool:
        if not isinstance(secret, str) or not isinstance(hashed, str) or not hashed:
            return False
        try:
            return self._ph.verify(hashed, secret)
        except (VerificationError, InvalidHashError, UnicodeError):
            # VerifyMismatchError is a VerificationError; non-ascii hashes fail to encode
            return False
