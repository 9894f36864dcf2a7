# taskvault/routes/mcp.py
"""
JSON-RPC tool endpoint, one HTTP request per call.
Every tools/call carries the password and resolves the owner from scratch.
"""
import json
from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from ..config import settings
from ..database import Database
from ..errors import StoreUnavailable, TaskVaultError
from ..schemas import JsonRpcRequest
from ..services.tasks import TaskService
from ..services.tools import error_payload, password_tools, run_task_tool, TASK_TOOL_NAMES
from ..utils.logging import logger
from ..vault.repository import TaskRepository
from ..vault.resolver import IdentityResolver
from .deps import get_resolver

router = APIRouter(prefix="/api", tags=["mcp"])

PROTOCOL_VERSION = "2024-11-05"

def _result(id, result: dict) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "id": id, "result": result})

def _error(id, code: int, message: str) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "id": id, "error": {"code": code, "message": message}})

def execute_tool(name: str, args: dict, database: Database, resolver: IdentityResolver) -> dict:
    args = dict(args or {})
    password = args.pop("password", None)
    if name != "setup_password" and name not in TASK_TOOL_NAMES:
        return {"error": f"Unknown tool: {name}"}
    try:
        # session opened here only: initialize and tools/list never need the store
        db = database.session()
    except SQLAlchemyError:
        return error_payload(StoreUnavailable("session"))
    except TaskVaultError as e:
        return error_payload(e)
    try:
        repo = TaskRepository(db)
        service = TaskService(repo)
        identity = resolver.resolve_owner(password, repo)
        if name == "setup_password":
            return service.summary(identity.owner_id, identity.is_new_owner)
        return run_task_tool(service, identity.owner_id, name, args)
    except (TaskVaultError, ValidationError) as e:
        logger.info("tool %s refused: %s", name, e.__class__.__name__)
        return error_payload(e)
    finally:
        db.close()

@router.post("/mcp")
def mcp_endpoint(request: Request,
                 payload: dict = Body(...),
                 resolver: IdentityResolver = Depends(get_resolver)):
    try:
        rpc = JsonRpcRequest.model_validate(payload)
    except ValidationError:
        return _error(payload.get("id"), -32600, "Invalid Request")

    try:
        # ── initialize
        if rpc.method == "initialize":
            return _result(rpc.id, {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": {"name": settings.APP_NAME, "version": settings.APP_VERSION},
            })

        # ── notifications/initialized (no response body)
        if rpc.method == "notifications/initialized":
            return Response(status_code=200)

        # ── tools/list
        if rpc.method == "tools/list":
            return _result(rpc.id, {"tools": password_tools()})

        # ── tools/call
        if rpc.method == "tools/call":
            name = rpc.params.get("name")
            args = rpc.params.get("arguments") or {}
            result = execute_tool(name, args, request.app.state.database, resolver)
            return _result(rpc.id, {
                "content": [{"type": "text", "text": json.dumps(result, indent=2)}],
                "isError": "error" in result,
            })

        return _error(rpc.id, -32601, f"Method not found: {rpc.method}")
    except Exception:
        logger.exception("MCP error in %s", rpc.method)
        return _error(rpc.id, -32603, "Internal error")
