import hashlib
import logging
import sys

from ..config import settings

logger = logging.getLogger("taskvault")

if not logger.handlers:
    # stderr only: the stdio transport owns stdout
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    logger.addHandler(_handler)
    logger.setLevel(settings.LOG_LEVEL.upper())
    logger.propagate = False

def fingerprint(owner_id: str | None) -> str:
    """Short non-reversible tag for an owner id, safe to put in logs."""
    if not owner_id:
        return "-"
    return hashlib.sha256(owner_id.encode("utf-8")).hexdigest()[:10]
