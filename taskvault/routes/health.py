from datetime import datetime, timezone
from fastapi import APIRouter, Request

from ..config import settings
from ..services.tools import TASK_TOOL_NAMES

router = APIRouter(prefix="/api", tags=["health"])

@router.get("/health")
def health(request: Request):
    db_ok = request.app.state.database.ping()
    return {
        "status": "ok",
        "server": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected" if db_ok else "error",
        "tools": ["setup_password", *TASK_TOOL_NAMES],
    }
