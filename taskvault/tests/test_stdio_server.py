# tests/test_stdio_server.py
import asyncio

from taskvault.services.toolbox import TaskToolbox
from taskvault.stdio_server import build_server

def test_registers_cached_variant_tools(database, resolver, cache):
    server = build_server(TaskToolbox(database, resolver, cache))
    names = {t.name for t in asyncio.run(server.list_tools())}
    assert names == {"activate_account", "deactivate_account", "account_status",
                     "add_task", "list_tasks", "complete_task", "delete_task", "clear_done"}
