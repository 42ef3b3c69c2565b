"""Generate database engine / sessions"""

from functools import lru_cache
from typing import Any, Iterator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from kanban.core.config import get_settings
from kanban.db.schema import Base
from kanban.db.sql_repository import SQLUnitOfWork


def build_engine(url: str, echo: bool = False, **kwargs: Any) -> Engine:
    """Create an engine. SQLite connections get the pysqlite hooks needed for SAVEPOINT support."""
    engine = create_engine(url, echo=echo, **kwargs)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_savepoints(engine)
    return engine


def _enable_sqlite_savepoints(engine: Engine) -> None:
    # pysqlite emits its own BEGIN lazily, which breaks nested transactions. Let SQLAlchemy emit it instead.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record) -> None:  # type: ignore[no-untyped-def]
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:  # type: ignore[no-untyped-def]
        conn.exec_driver_sql("BEGIN")


@lru_cache
def get_engine() -> Engine:
    settings = get_settings()
    return build_engine(settings.database_url, echo=settings.echo_sql)


def init_db(engine: Engine) -> None:
    """Ensure all tables are created"""
    Base.metadata.create_all(bind=engine)


def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db() -> Iterator[Session]:
    db = session_factory(get_engine())()
    try:
        yield db
    finally:
        db.close()


def get_unit_of_work(db_session: Session) -> SQLUnitOfWork:
    return SQLUnitOfWork(db_session)
