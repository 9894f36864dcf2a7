"""
stdio tool server for the device-cached variant.

    taskvault-stdio          # run from an MCP client config

Enter the password once with activate_account; later calls reuse the owner id
cached in CREDENTIAL_CACHE_PATH until deactivate_account.
"""
from typing import List, Optional

from mcp.server.fastmcp import FastMCP

from .config import Settings, settings as default_settings
from .database import Database
from .services.toolbox import TaskToolbox
from .utils.logging import logger
from .vault.cache import LocalCredentialCache
from .vault.hasher import CredentialHasher
from .vault.resolver import IdentityResolver

def build_toolbox(settings: Settings = default_settings) -> TaskToolbox:
    return TaskToolbox(
        database=Database(settings.DATABASE_URL, create_schema=settings.AUTO_CREATE_SCHEMA),
        resolver=IdentityResolver.from_settings(CredentialHasher.from_settings(settings), settings),
        cache=LocalCredentialCache(settings.CREDENTIAL_CACHE_PATH),
    )

def build_server(toolbox: TaskToolbox) -> FastMCP:
    mcp = FastMCP("taskvault")

    @mcp.tool()
    def activate_account(password: str) -> dict:
        """Set your password the first time, or verify it on this device. Call this first."""
        return toolbox.activate_account(password)

    @mcp.tool()
    def deactivate_account() -> dict:
        """Forget the password on this device. Your tasks stay stored."""
        return toolbox.deactivate_account()

    @mcp.tool()
    def account_status() -> dict:
        """Show whether this device is activated, with task counts."""
        return toolbox.account_status()

    @mcp.tool()
    def add_task(title: str, priority: str = "medium", dueDate: Optional[str] = None,
                 tags: Optional[List[str]] = None) -> dict:
        """Add a new task. priority is low, medium or high; dueDate is YYYY-MM-DD."""
        return toolbox.call("add_task", {"title": title, "priority": priority,
                                         "dueDate": dueDate, "tags": tags or []})

    @mcp.tool()
    def list_tasks(filter: str = "all", priority: Optional[str] = None, tag: Optional[str] = None) -> dict:
        """List your tasks. filter is all, pending or completed."""
        return toolbox.call("list_tasks", {"filter": filter, "priority": priority, "tag": tag})

    @mcp.tool()
    def complete_task(id: Optional[int] = None, title: Optional[str] = None) -> dict:
        """Mark a task as completed, by id or partial title match."""
        return toolbox.call("complete_task", {"id": id, "title": title})

    @mcp.tool()
    def delete_task(id: Optional[int] = None, title: Optional[str] = None) -> dict:
        """Delete a task permanently, by id or partial title match."""
        return toolbox.call("delete_task", {"id": id, "title": title})

    @mcp.tool()
    def clear_done() -> dict:
        """Remove all completed tasks."""
        return toolbox.call("clear_done")

    return mcp

def main() -> None:
    server = build_server(build_toolbox())
    logger.info("taskvault stdio server starting")
    server.run()

if __name__ == "__main__":
    main()
