
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional, Union
from datetime import date, datetime

Priority = Literal["low", "medium", "high"]
StatusFilter = Literal["all", "pending", "completed"]

class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    priority: Priority
    due_date: Optional[date] = Field(None, serialization_alias="dueDate")
    tags: List[str] = Field(default_factory=list)
    completed: bool
    completed_at: Optional[datetime] = Field(None, serialization_alias="completedAt")
    created_at: datetime = Field(serialization_alias="createdAt")

# Tool arguments (password is taken off before these are built)
class AddTaskInput(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    priority: Priority = "medium"
    due_date: Optional[date] = Field(None, alias="dueDate")
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

class ListTasksInput(BaseModel):
    filter: StatusFilter = "all"
    priority: Optional[Priority] = None
    tag: Optional[str] = None

class TaskRefInput(BaseModel):
    id: Optional[int] = None
    title: Optional[str] = None

class Summary(BaseModel):
    total: int
    pending: int
    completed: int

# JSON-RPC envelope
class JsonRpcRequest(BaseModel):
    jsonrpc: str = "2.0"
    id: Optional[Union[int, str]] = None
    method: str
    params: Dict[str, Any] = Field(default_factory=dict)
