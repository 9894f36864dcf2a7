# taskvault/services/tasks.py
from __future__ import annotations
from typing import Any, Dict

from ..errors import TaskNotFound
from ..schemas import AddTaskInput, ListTasksInput, Summary, TaskOut, TaskRefInput
from ..utils.logging import logger, fingerprint
from ..vault.repository import TaskRepository

def task_payload(task) -> Dict[str, Any]:
    return TaskOut.model_validate(task).model_dump(mode="json", by_alias=True)

class TaskService:
    """
    Task operations for one already-resolved owner id.
    Results are plain dicts, ready to be JSON encoded by a transport.
    """

    def __init__(self, repo: TaskRepository):
        self.repo = repo

    def summary(self, owner_id: str, is_new_owner: bool = False) -> Dict[str, Any]:
        counts = Summary(**self.repo.counts(owner_id))
        if is_new_owner or counts.total == 0:
            return {"message": "Password accepted! No tasks yet. Use add_task to get started."}
        return {"message": "Welcome back! Password verified.", "summary": counts.model_dump()}

    def add_task(self, owner_id: str, args: AddTaskInput) -> Dict[str, Any]:
        task = self.repo.create(owner_id, args.title, priority=args.priority,
                                due_date=args.due_date, tags=args.tags)
        logger.info("task %s added for owner %s", task.id, fingerprint(owner_id))
        return {"success": True, "task": task_payload(task)}

    def list_tasks(self, owner_id: str, args: ListTasksInput) -> Dict[str, Any]:
        tasks = self.repo.find(owner_id, status=args.filter, priority=args.priority, tag=args.tag)
        return {
            "summary": Summary(**self.repo.counts(owner_id)).model_dump(),
            "tasks": [task_payload(t) for t in tasks],
        }

    def complete_task(self, owner_id: str, ref: TaskRefInput) -> Dict[str, Any]:
        task = self.repo.complete(owner_id, task_id=ref.id, title=ref.title)
        if task is None:
            raise TaskNotFound(ref.title, pending_only=True)
        return {"success": True, "message": f'"{task.title}" marked complete!', "task": task_payload(task)}

    def delete_task(self, owner_id: str, ref: TaskRefInput) -> Dict[str, Any]:
        task = self.repo.delete(owner_id, task_id=ref.id, title=ref.title)
        if task is None:
            raise TaskNotFound(ref.title)
        logger.info("task %s deleted for owner %s", task.id, fingerprint(owner_id))
        return {"success": True, "message": f'"{task.title}" deleted.'}

    def clear_done(self, owner_id: str) -> Dict[str, Any]:
        n = self.repo.clear_completed(owner_id)
        return {"success": True, "message": f"Cleared {n} completed task(s).", "removed": n}
