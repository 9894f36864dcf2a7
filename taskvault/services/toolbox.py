# taskvault/services/toolbox.py
"""
Tool behaviour for the device-cached variant.

The password is entered once through activate_account. The resolved owner id
is then kept in the local credential cache and every task tool runs as that
cached bearer until deactivate_account clears it.
"""
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from pydantic import ValidationError

from ..database import Database
from ..errors import CacheWriteError, NotActivated, TaskVaultError
from ..utils.logging import logger, fingerprint
from ..vault.cache import LocalCredentialCache
from ..vault.repository import TaskRepository
from ..vault.resolver import CachedBearer, IdentityResolver
from .tasks import TaskService
from .tools import error_payload, run_task_tool, TASK_TOOL_NAMES

class TaskToolbox:
    def __init__(self, database: Database, resolver: IdentityResolver, cache: LocalCredentialCache):
        self.database = database
        self.resolver = resolver
        self.cache = cache

    @contextmanager
    def _service(self) -> Iterator[TaskService]:
        db = self.database.session()
        try: yield TaskService(TaskRepository(db))
        finally: db.close()

    def current_identity(self) -> Optional[CachedBearer]:
        owner_id = self.cache.load()
        return CachedBearer(owner_id) if owner_id else None

    def activate_account(self, password: str) -> Dict[str, Any]:
        try:
            cached = self.cache.load()
            with self._service() as service:
                if cached:
                    # returning user on this device: check against the cached owner only
                    identity = self.resolver.confirm(password, cached)
                else:
                    identity = self.resolver.resolve_owner(password, service.repo)
                    self._remember(identity.owner_id)
                    logger.info("device activated for owner %s (new=%s)",
                                fingerprint(identity.owner_id), identity.is_new_owner)
                result = service.summary(identity.owner_id, identity.is_new_owner)
        except TaskVaultError as e:
            return error_payload(e)
        if identity.is_new_owner:
            result["warning"] = "If you forget this password, your tasks cannot be recovered."
        return result

    def _remember(self, owner_id: str) -> None:
        try:
            self.cache.save(owner_id)
        except OSError as e:
            logger.error("credential cache write failed: %s", e.__class__.__name__)
            raise CacheWriteError("cache save") from e

    def deactivate_account(self) -> Dict[str, Any]:
        try:
            self.cache.clear()
        except OSError as e:
            logger.error("credential cache clear failed: %s", e.__class__.__name__)
            return error_payload(CacheWriteError("cache clear"))
        logger.info("device deactivated")
        return {"success": True, "message": "Password removed from this device. Use activate_account to sign in again."}

    def account_status(self) -> Dict[str, Any]:
        identity = self.current_identity()
        if identity is None:
            return {"activated": False, "message": NotActivated.user_message}
        try:
            with self._service() as service:
                counts = service.repo.counts(identity.owner_id)
        except TaskVaultError as e:
            return {"activated": True, **error_payload(e)}
        return {"activated": True, "summary": counts}

    def call(self, name: str, args: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run a task tool as the cached owner. Refused while the device is not activated."""
        if name not in TASK_TOOL_NAMES:
            return {"error": f"Unknown tool: {name}"}
        try:
            identity = self.current_identity()
            if identity is None:
                raise NotActivated()
            with self._service() as service:
                return run_task_tool(service, identity.owner_id, name, dict(args or {}))
        except (TaskVaultError, ValidationError) as e:
            return error_payload(e)
