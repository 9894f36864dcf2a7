from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, settings as default_settings
from .database import Database
from .errors import TaskVaultError
from .routes.health import router as health_router
from .routes.mcp import router as mcp_router
from .routes.tasks import router as tasks_router
from .utils.logging import logger
from .vault.hasher import CredentialHasher
from .vault.resolver import IdentityResolver

def create_app(settings: Optional[Settings] = None,
               database: Optional[Database] = None,
               hasher: Optional[CredentialHasher] = None) -> FastAPI:
    """Composition root: one store handle and one resolver per process."""
    settings = settings or default_settings
    app = FastAPI(title="taskvault",
                  description="Personal task tracker keyed by hashed passwords",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json")

    app.state.database = database or Database(settings.DATABASE_URL, create_schema=settings.AUTO_CREATE_SCHEMA)
    app.state.resolver = IdentityResolver.from_settings(hasher or CredentialHasher.from_settings(settings), settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-Task-Secret"],
    )

    @app.exception_handler(TaskVaultError)
    async def _vault_error(request: Request, exc: TaskVaultError):
        logger.warning("%s on %s", exc.__class__.__name__, request.url.path)
        return JSONResponse(status_code=503, content={"error": exc.user_message})

    app.include_router(health_router)
    app.include_router(mcp_router)
    app.include_router(tasks_router)
    return app

app = create_app()

def run():
    import uvicorn
    uvicorn.run("taskvault.main:app", host="0.0.0.0", port=8000)
