# taskvault/services/tools.py
from copy import deepcopy
from typing import Any, Dict, List

from pydantic import ValidationError

from ..errors import TaskVaultError
from ..schemas import AddTaskInput, ListTasksInput, TaskRefInput
from .tasks import TaskService

_PRIORITY = {"type": "string", "enum": ["low", "medium", "high"]}
_PASSWORD = {"type": "string", "description": "Your password (min 4 chars)"}

# name -> (description, properties, required) without the password argument
_TASK_TOOLS = {
    "add_task": (
        "Add a new task to your personal todo list.",
        {
            "title": {"type": "string", "description": "Task description"},
            "priority": _PRIORITY,
            "dueDate": {"type": "string", "description": "Due date YYYY-MM-DD"},
            "tags": {"type": "array", "items": {"type": "string"}},
        },
        ["title"],
    ),
    "list_tasks": (
        "List your tasks. Optionally filter by status, priority, or tag.",
        {
            "filter": {"type": "string", "enum": ["all", "pending", "completed"]},
            "priority": _PRIORITY,
            "tag": {"type": "string"},
        },
        [],
    ),
    "complete_task": (
        "Mark a task as completed, by id or partial title match.",
        {
            "id": {"type": "integer", "description": "Task id"},
            "title": {"type": "string", "description": "Partial title to search"},
        },
        [],
    ),
    "delete_task": (
        "Permanently delete a task, by id or partial title match.",
        {
            "id": {"type": "integer", "description": "Task id"},
            "title": {"type": "string", "description": "Partial title to search"},
        },
        [],
    ),
    "clear_done": ("Remove all completed tasks at once.", {}, []),
}

TASK_TOOL_NAMES = list(_TASK_TOOLS)

def _tool(name: str, description: str, properties: dict, required: list) -> Dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "inputSchema": {"type": "object", "properties": deepcopy(properties), "required": list(required)},
    }

def password_tools() -> List[Dict[str, Any]]:
    """Catalogue for the variant where every call carries the password."""
    tools = [_tool("setup_password",
                   "Verify your password and see your task summary. Call this first.",
                   {"password": _PASSWORD}, ["password"])]
    for name, (desc, props, req) in _TASK_TOOLS.items():
        tools.append(_tool(name, desc, {"password": _PASSWORD, **props}, ["password", *req]))
    return tools

def run_task_tool(service: TaskService, owner_id: str, name: str, args: Dict[str, Any]) -> Dict[str, Any]:
    """Dispatch one task tool for an authenticated owner. Raises KeyError for unknown names."""
    if name == "add_task":
        return service.add_task(owner_id, AddTaskInput.model_validate(args))
    if name == "list_tasks":
        return service.list_tasks(owner_id, ListTasksInput.model_validate(args))
    if name == "complete_task":
        return service.complete_task(owner_id, TaskRefInput.model_validate(args))
    if name == "delete_task":
        return service.delete_task(owner_id, TaskRefInput.model_validate(args))
    if name == "clear_done":
        return service.clear_done(owner_id)
    raise KeyError(name)

def error_payload(exc: Exception) -> Dict[str, Any]:
    """Turn an expected failure into the short message shown to the user."""
    if isinstance(exc, TaskVaultError):
        return {"error": exc.user_message}
    if isinstance(exc, ValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ())) or "arguments"
        return {"error": f"Invalid {field}: {first.get('msg', 'bad value')}"}
    return {"error": TaskVaultError.user_message}
