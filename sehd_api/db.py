from typing import Generator, Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from .config import settings


def build_engine(database_url: str, echo: bool = False, **engine_kwargs) -> Engine:
    # SQLite needs cross-thread access for the TestClient and an explicit
    # pragma so RESTRICT foreign keys are enforced
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo, pool_pre_ping=True, **engine_kwargs)

    sqlite_engine = create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False},
        **engine_kwargs,
    )

    @event.listens_for(sqlite_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = build_engine(settings.database_url, echo=settings.sql_echo)


def init_db(bind: Optional[Engine] = None) -> None:
    # Import models so every table is registered in the metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


def get_session() -> Generator[Session, None, None]:
    session = Session(engine)
    try:
        yield session
    finally:
        session.close()
