"""Database engine and session management."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from subscription_catalog.config import Settings, settings
from subscription_catalog.models import Base


def build_engine(database_url: str | None = None, echo: bool | None = None, config: Settings | None = None) -> Engine:
    """Create an engine for the configured database.

    SQLite connections are shared across FastAPI's worker threads, and an
    in-memory SQLite database is pinned to a single connection so every
    session sees the same data.
    """
    config = config or settings
    url = database_url or config.database_url
    echo = config.database_echo if echo is None else echo

    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)

    return create_engine(url, echo=echo, pool_pre_ping=True, pool_recycle=300)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)
