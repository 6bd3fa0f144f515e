"""SQLite connection factory for the member store.

Schema changes live in ``db/migrations`` as ``NNN_description.sql`` files.
Each file is applied once, in version order, inside its own transaction, and
recorded in ``schema_version``.
"""

import logging
import re
import sqlite3
from pathlib import Path
from typing import NamedTuple

from roster_tiers.exceptions import MigrationError

logger = logging.getLogger(__name__)

_MIGRATIONS_DIR = Path(__file__).parent / "migrations"
_MIGRATION_NAME = re.compile(r"^(\d{3})_[a-z0-9_]+\.sql$")


class Migration(NamedTuple):
    version: int
    path: Path


def create_connection(
    path: str | Path,
    *,
    check_same_thread: bool = True,
    migrations_dir: Path | None = None,
) -> sqlite3.Connection:
    """Open the member store and bring its schema up to date.

    File databases use WAL so a sweep's writes do not block readers.
    """
    conn = sqlite3.connect(str(path), check_same_thread=check_same_thread)
    conn.row_factory = sqlite3.Row
    if str(path) != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    try:
        _migrate(conn, discover_migrations(migrations_dir or _MIGRATIONS_DIR))
    except Exception:
        conn.close()
        raise
    return conn


def discover_migrations(directory: Path) -> list[Migration]:
    """List the ``.sql`` files in ``directory`` ordered by version."""
    migrations: dict[int, Migration] = {}
    for sql_file in directory.glob("*.sql"):
        match = _MIGRATION_NAME.match(sql_file.name)
        if match is None:
            raise MigrationError(f"Migration {sql_file.name!r} must be named like 001_description.sql")
        version = int(match.group(1))
        if version in migrations:
            raise MigrationError(
                f"Migrations {migrations[version].path.name!r} and {sql_file.name!r} share version {version}"
            )
        migrations[version] = Migration(version, sql_file)
    return [migrations[v] for v in sorted(migrations)]


def _schema_version(conn: sqlite3.Connection) -> int:
    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    return row[0] or 0


def _migrate(conn: sqlite3.Connection, migrations: list[Migration]) -> None:
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_version ("
        "    version INTEGER PRIMARY KEY,"
        "    applied_at TEXT NOT NULL DEFAULT (datetime('now'))"
        ")"
    )
    current = _schema_version(conn)
    pending = [m for m in migrations if m.version > current]
    for migration in pending:
        _apply(conn, migration)
    if pending:
        logger.info("Member store migrated from schema version %d to %d", current, pending[-1].version)


def _apply(conn: sqlite3.Connection, migration: Migration) -> None:
    logger.debug("Applying migration %s", migration.path.name)
    statements = [s.strip() for s in migration.path.read_text().split(";") if s.strip()]
    # DDL only joins the transaction when sqlite3's implicit transactions are off.
    isolation_level = conn.isolation_level
    conn.isolation_level = None
    try:
        conn.execute("BEGIN")
        for statement in statements:
            conn.execute(statement)
        conn.execute("INSERT INTO schema_version (version) VALUES (?)", (migration.version,))
        conn.execute("COMMIT")
    except sqlite3.Error:
        conn.execute("ROLLBACK")
        raise
    finally:
        conn.isolation_level = isolation_level
