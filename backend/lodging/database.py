from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from .config import get_settings
from .models import Base

settings = get_settings()


def enable_sqlite_savepoints(engine: Engine) -> Engine:
    """
    pysqlite defers BEGIN until the first DML statement, so a SAVEPOINT issued
    earlier opens the outer transaction itself and RELEASE commits it. Hand
    BEGIN over to SQLAlchemy so nested transactions behave on SQLite.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


_is_sqlite = settings.database_url.startswith("sqlite")
_connect_args = {"check_same_thread": False} if _is_sqlite else {}

engine = create_engine(
    settings.database_url,
    echo=settings.echo_sql,
    pool_pre_ping=True,
    connect_args=_connect_args,
)
if _is_sqlite:
    enable_sqlite_savepoints(engine)

session_factory = sessionmaker(engine, expire_on_commit=False, class_=Session)


def create_schema() -> None:
    Base.metadata.create_all(engine)
