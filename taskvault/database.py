import threading
from typing import Generator, Optional
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session, DeclarativeBase
from sqlalchemy.pool import StaticPool
from fastapi import Request

from .errors import StoreUnavailable
from .utils.logging import logger

def _normalize_db_url(url: str) -> str:
    # Use psycopg v3 driver with SQLAlchemy
    if url.startswith("postgresql://"):
        return "postgresql+psycopg://" + url[len("postgresql://"):]
    if url.startswith("postgres://"):
        return "postgresql+psycopg://" + url[len("postgres://"):]
    return url

class Base(DeclarativeBase):
    pass

class Database:
    """
    Store handle owned by the composition root.
    connect() is idempotent: the first call builds the engine, later calls reuse it.
    """

    def __init__(self, url: str, create_schema: bool = True):
        self.url = _normalize_db_url(url)
        self.create_schema = create_schema
        self._engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None
        self._lock = threading.Lock()

    def connect(self) -> Engine:
        if self._engine is not None:
            return self._engine
        with self._lock:
            if self._engine is None:
                kwargs = {"pool_pre_ping": True, "future": True}
                if self.url.startswith("sqlite"):
                    kwargs["connect_args"] = {"check_same_thread": False}
                    if ":memory:" in self.url or self.url.rstrip("/") == "sqlite:":
                        kwargs["poolclass"] = StaticPool
                engine = create_engine(self.url, **kwargs)
                if self.create_schema:
                    from . import models  # noqa: F401  (register tables)
                    try:
                        Base.metadata.create_all(bind=engine)
                    except SQLAlchemyError as e:
                        engine.dispose()
                        logger.error("schema setup failed: %s", e.__class__.__name__)
                        raise StoreUnavailable("connect") from e
                self._sessionmaker = sessionmaker(
                    bind=engine,
                    autocommit=False,
                    autoflush=False,
                    expire_on_commit=False,
                    future=True,
                )
                self._engine = engine
                logger.info("database connected (%s)", engine.dialect.name)
        return self._engine

    def session(self) -> Session:
        self.connect()
        return self._sessionmaker()

    def ping(self) -> bool:
        try:
            with self.connect().connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, StoreUnavailable):
            logger.warning("database ping failed")
            return False

    def dispose(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._sessionmaker = None

def get_db(request: Request) -> Generator:
    database: Database = request.app.state.database
    try:
        db = database.session()
    except SQLAlchemyError as e:
        raise StoreUnavailable("session") from e
    try: yield db
    finally: db.close()
