import sqlite3
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List

from sqlalchemy import event
from sqlalchemy.engine import Engine, make_url
from sqlmodel import create_engine

from world_api.core.config import Settings, get_settings
from world_api.core.logging import get_logger

logger = get_logger("world_api.db")


def _enable_sqlite_transactions(engine: Engine) -> None:
    """
    Let SQLAlchemy own transaction boundaries on SQLite.

    pysqlite only opens a transaction implicitly before DML, so schema scripts
    would run outside of it. Turning the driver's handling off and emitting
    BEGIN ourselves makes DDL and DML commit or roll back together.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_db_engine(settings: Settings) -> Engine:
    """Build the engine described by the settings (SQLite file by default)."""
    url = make_url(settings.database_url_computed)
    echo_sql = settings.is_dev and settings.db_echo

    if url.get_backend_name() != "sqlite":
        return create_engine(url, echo=echo_sql, pool_pre_ping=True)

    if url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        url,
        echo=echo_sql,
        connect_args={"check_same_thread": False},
    )
    _enable_sqlite_transactions(engine)
    return engine


@lru_cache()
def get_engine() -> Engine:
    """Engine shared by the running application."""
    settings = get_settings()
    logger.info("Using database %s", settings.database_url_computed)
    return create_db_engine(settings)


def split_statements(script: str) -> List[str]:
    """
    Split a SQL script into its ordered list of complete statements.

    Uses sqlite3.complete_statement, so semicolons inside string literals or
    trigger bodies do not end a statement. Trailing comments are dropped.
    """
    statements: List[str] = []
    buffer = ""
    for piece in script.split(";"):
        buffer += piece + ";"
        if sqlite3.complete_statement(buffer):
            statement = buffer.strip()
            if _has_sql(statement):
                statements.append(statement)
            buffer = ""

    # The last split piece always gets a spurious ";" appended
    leftover = buffer[:-1].strip()
    if _has_sql(leftover):
        statements.append(leftover)
    return statements


def _has_sql(text: str) -> bool:
    lines = [line.strip() for line in text.splitlines()]
    return any(line and not line.startswith("--") and line != ";" for line in lines)


def run_scripts(engine: Engine, paths: Iterable[str | Path]) -> int:
    """
    Execute every statement of every script inside a single transaction.

    Any failure rolls the whole batch back and is re-raised.
    Returns the number of statements executed.
    """
    statements: List[str] = []
    for path in paths:
        script = Path(path).read_text(encoding="utf-8")
        statements.extend(split_statements(script))

    with engine.begin() as conn:
        for statement in statements:
            conn.exec_driver_sql(statement)

    logger.info("Executed %d statements", len(statements))
    return len(statements)
