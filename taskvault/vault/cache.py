# taskvault/vault/cache.py
import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..utils.logging import logger

class LocalCredentialCache:
    """
    One owner id persisted on this device so the password is asked once.

    Whoever can read this file holds the account: the cached hash is a bearer
    credential and is accepted with no further challenge. The password itself
    is never written here.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> Optional[str]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("credential cache unreadable (%s), ignoring it", e.__class__.__name__)
            return None
        try:
            data = json.loads(raw.decode("utf-8"))
        except ValueError:
            # UnicodeDecodeError and JSONDecodeError are both ValueError
            logger.warning("credential cache is corrupt, ignoring it")
            return None
        owner_id = data.get("hash") if isinstance(data, dict) else None
        if not isinstance(owner_id, str) or not owner_id:
            logger.warning("credential cache has no usable entry, ignoring it")
            return None
        return owner_id

    def save(self, owner_id: str) -> None:
        if not owner_id:
            raise ValueError("owner_id must be non-empty")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"hash": owner_id, "saved_at": datetime.now(timezone.utc).isoformat()}
        fd, tmp = tempfile.mkstemp(prefix=".auth-", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp, 0o600)
            os.replace(tmp, self.path)
        except BaseException:
            try: os.unlink(tmp)
            except FileNotFoundError: pass
            raise

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
