from __future__ import annotations
from datetime import date, datetime, timezone
from typing import Optional, List
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, BigInteger, Integer, Boolean, Date, DateTime, JSON, Index
from .database import Base

PRIORITIES = ("low", "medium", "high")

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

# ----------------------------
# Tasks, partitioned by owner id (the argon2 hash of the owner's password)
# ----------------------------
class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    priority: Mapped[str] = mapped_column(String(8), nullable=False, default="medium")
    due_date: Mapped[Optional[date]] = mapped_column(Date)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index("ix_tasks_owner_completed", "owner_id", "completed"),
    )
