"""SQLModel database engine and session management."""

import logging
from pathlib import Path

from sqlalchemy import inspect
from sqlmodel import SQLModel, create_engine, Session

from journal.config import settings

logger = logging.getLogger(__name__)

# SQLite needs check_same_thread=False; PostgreSQL does not
connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.database_url,
    echo=False,
    connect_args=connect_args,
)

# Columns added after the first release: table -> {name: DDL type}
_COLUMN_MIGRATIONS = {
    "trade": {
        "excluded": "BOOLEAN NOT NULL DEFAULT 0",
        "treat_as_loss": "BOOLEAN NOT NULL DEFAULT 0",
        "high_override_id": "VARCHAR",
        "trader": "VARCHAR NOT NULL DEFAULT ''",
    },
    "trade_high": {
        "position": "INTEGER NOT NULL DEFAULT 0",
    },
}


def _ensure_sqlite_dir():
    """Create the parent folder of a file-backed SQLite database."""
    prefix = "sqlite:///"
    url = settings.database_url
    if url.startswith(prefix) and ":memory:" not in url:
        Path(url[len(prefix):]).parent.mkdir(parents=True, exist_ok=True)


def _run_migrations(db_engine=None):
    """Add columns missing from databases created by older versions."""
    from sqlalchemy import text

    db_engine = db_engine or engine
    inspector = inspect(db_engine)
    tables = set(inspector.get_table_names())

    missing = []
    for table, wanted in _COLUMN_MIGRATIONS.items():
        if table not in tables:
            continue
        columns = {col["name"] for col in inspector.get_columns(table)}
        missing.extend((table, name, ddl) for name, ddl in wanted.items() if name not in columns)
    if not missing:
        return

    with db_engine.connect() as conn:
        for table, name, ddl in missing:
            logger.info(f"Migrating: adding {table}.{name}")
            conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {name} {ddl}"))
        conn.commit()


def create_db_and_tables():
    """Create all tables. Called on startup."""
    import journal.models  # noqa: F401  (registers tables on the metadata)

    _ensure_sqlite_dir()
    SQLModel.metadata.create_all(engine)
    _run_migrations()


def get_session() -> Session:
    """Dependency that yields a database session."""
    with Session(engine) as session:
        yield session
