from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..services.tasks import TaskService
from ..vault.repository import TaskRepository
from ..vault.resolver import IdentityResolver

def get_repo(db: Session = Depends(get_db)) -> TaskRepository:
    return TaskRepository(db)

def get_service(repo: TaskRepository = Depends(get_repo)) -> TaskService:
    return TaskService(repo)

def get_resolver(request: Request) -> IdentityResolver:
    return request.app.state.resolver
