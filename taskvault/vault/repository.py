# taskvault/vault/repository.py
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Iterator, List, Optional
from sqlalchemy import select, delete, func, case, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from ..errors import StoreUnavailable
from ..models import Task
from ..utils.logging import logger

_PRIORITY_RANK = case((Task.priority == "high", 0), (Task.priority == "medium", 1), else_=2)

def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

class TaskRepository:
    """Task queries, every one scoped to a single owner id."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _store(self, op: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("store operation %s failed: %s", op, e.__class__.__name__)
            raise StoreUnavailable(op) from e

    def iter_owner_ids(self) -> Iterator[str]:
        # streamed; a failure halfway through surfaces as StoreUnavailable
        with self._store("distinct_owners"):
            for owner_id in self.db.execute(select(Task.owner_id).distinct()).scalars():
                yield owner_id

    def create(self, owner_id: str, title: str, priority: str = "medium",
               due_date: Optional[date] = None, tags: Optional[List[str]] = None) -> Task:
        task = Task(owner_id=owner_id, title=title, priority=priority,
                    due_date=due_date, tags=list(tags or []))
        with self._store("create"):
            self.db.add(task)
            self.db.commit()
            self.db.refresh(task)
        return task

    def find(self, owner_id: str, status: str = "all", priority: Optional[str] = None,
             tag: Optional[str] = None) -> List[Task]:
        stmt = select(Task).where(Task.owner_id == owner_id)
        if status == "pending": stmt = stmt.where(Task.completed.is_(False))
        if status == "completed": stmt = stmt.where(Task.completed.is_(True))
        if priority: stmt = stmt.where(Task.priority == priority)
        stmt = stmt.order_by(Task.completed, _PRIORITY_RANK, desc(Task.created_at), desc(Task.id))
        with self._store("find"):
            rows = self.db.execute(stmt).scalars().all()
        if tag:
            # JSON containment differs per dialect; tag lists are short
            rows = [r for r in rows if tag in (r.tags or [])]
        return list(rows)

    def counts(self, owner_id: str) -> dict:
        stmt = select(
            func.count(Task.id),
            func.count(case((Task.completed.is_(True), 1))),
        ).where(Task.owner_id == owner_id)
        with self._store("counts"):
            total, completed = self.db.execute(stmt).one()
        return {"total": total, "pending": total - completed, "completed": completed}

    def find_one(self, owner_id: str, task_id: Optional[int] = None, title: Optional[str] = None,
                 pending_only: bool = False) -> Optional[Task]:
        if task_id is None and not title:
            return None
        stmt = select(Task).where(Task.owner_id == owner_id)
        if task_id is not None:
            stmt = stmt.where(Task.id == task_id)
        else:
            stmt = stmt.where(Task.title.ilike(f"%{_escape_like(title)}%", escape="\\"))
        if pending_only:
            stmt = stmt.where(Task.completed.is_(False))
        stmt = stmt.order_by(Task.created_at, Task.id).limit(1)
        with self._store("find_one"):
            return self.db.execute(stmt).scalar_one_or_none()

    def complete(self, owner_id: str, task_id: Optional[int] = None, title: Optional[str] = None) -> Optional[Task]:
        task = self.find_one(owner_id, task_id=task_id, title=title, pending_only=True)
        if task is None:
            return None
        with self._store("complete"):
            task.completed = True
            task.completed_at = datetime.now(timezone.utc)
            self.db.commit()
        return task

    def delete(self, owner_id: str, task_id: Optional[int] = None, title: Optional[str] = None) -> Optional[Task]:
        task = self.find_one(owner_id, task_id=task_id, title=title)
        if task is None:
            return None
        with self._store("delete"):
            self.db.delete(task)
            self.db.commit()
        return task

    def clear_completed(self, owner_id: str) -> int:
        stmt = delete(Task).where(Task.owner_id == owner_id, Task.completed.is_(True))
        with self._store("clear_completed"):
            result = self.db.execute(stmt)
            self.db.commit()
        return result.rowcount or 0
