from fastapi import APIRouter, Depends, Header, HTTPException, Query
from typing import Optional

from ..errors import AuthenticationMismatch, CredentialValidationError, TaskVaultError
from ..schemas import AddTaskInput, ListTasksInput, Priority, StatusFilter
from ..services.tasks import TaskService
from ..vault.repository import TaskRepository
from ..vault.resolver import FreshlyResolved, IdentityResolver
from .deps import get_repo, get_resolver, get_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

def _status_for(exc: TaskVaultError) -> int:
    if isinstance(exc, CredentialValidationError): return 400
    if isinstance(exc, AuthenticationMismatch): return 401
    return 503

def current_owner(x_task_secret: Optional[str] = Header(None),
                  repo: TaskRepository = Depends(get_repo),
                  resolver: IdentityResolver = Depends(get_resolver)) -> FreshlyResolved:
    """Resolve the X-Task-Secret header into an owner id for this request."""
    try:
        return resolver.resolve_owner(x_task_secret, repo)
    except TaskVaultError as e:
        raise HTTPException(status_code=_status_for(e), detail=e.user_message)

@router.get("")
def list_tasks(filter: StatusFilter = Query("all"),
               priority: Optional[Priority] = Query(None),
               tag: Optional[str] = Query(None),
               owner: FreshlyResolved = Depends(current_owner),
               service: TaskService = Depends(get_service)):
    args = ListTasksInput(filter=filter, priority=priority, tag=tag)
    return service.list_tasks(owner.owner_id, args)

@router.post("", status_code=201)
def add_task(payload: AddTaskInput,
             owner: FreshlyResolved = Depends(current_owner),
             service: TaskService = Depends(get_service)):
    return service.add_task(owner.owner_id, payload)

@router.delete("")
def clear_done(done: bool = Query(False),
               owner: FreshlyResolved = Depends(current_owner),
               service: TaskService = Depends(get_service)):
    if not done:
        raise HTTPException(status_code=405, detail="Only DELETE ?done=true is supported")
    return service.clear_done(owner.owner_id)
