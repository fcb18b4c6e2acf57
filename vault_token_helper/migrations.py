"""
Schema migrations for the token database.

Simple version-based migration system.  Each migration is an ordered
tuple of SQL statements keyed by its target version number.
:func:`run_migrations` applies any outstanding migrations in order, each
inside its own transaction, and records the version in
``schema_history`` before that transaction commits.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


class MigrationError(Exception):
    """Raised when the schema cannot be brought up to date."""


@dataclass(frozen=True)
class Migration:
    """A single schema change."""

    version: int
    name: str
    statements: tuple[str, ...]


# ---------------------------------------------------------------------------
# Migration registry
# ---------------------------------------------------------------------------

MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        version=1,
        name="initial",
        statements=(
            """
            CREATE TABLE IF NOT EXISTS vault_tokens (
                id          INTEGER   PRIMARY KEY,
                vault_addr  TEXT      NOT NULL UNIQUE,
                token       TEXT      NOT NULL,
                created_at  TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
            )
            """,
        ),
    ),
)

_HISTORY_SCHEMA = """
CREATE TABLE IF NOT EXISTS schema_history (
    version     INTEGER PRIMARY KEY,
    name        TEXT    NOT NULL,
    applied_on  TEXT    NOT NULL
)
"""


def latest_version(migrations: tuple[Migration, ...] = MIGRATIONS) -> int:
    """Return the highest version in *migrations* (0 if empty)."""
    return max((m.version for m in migrations), default=0)


def current_version(conn: sqlite3.Connection) -> int:
    """Return the current schema version (0 if fresh database)."""
    try:
        row = conn.execute("SELECT MAX(version) FROM schema_history").fetchone()
    except sqlite3.OperationalError:
        # schema_history doesn't exist yet
        return 0
    return row[0] if row and row[0] is not None else 0


def _validate(migrations: tuple[Migration, ...]) -> None:
    seen: set[int] = set()
    for m in migrations:
        if m.version <= 0:
            raise MigrationError(
                f"Migration {m.name!r} has invalid version {m.version}")
        if m.version in seen:
            raise MigrationError(f"Duplicate migration version {m.version}")
        seen.add(m.version)


def _apply(conn: sqlite3.Connection, migration: Migration) -> bool:
    """Apply *migration* and record it, all in one transaction.

    Returns False if another connection recorded it first.
    """
    # IMMEDIATE takes the write lock before the version is re-read, so the
    # check cannot go stale before COMMIT.
    conn.execute("BEGIN IMMEDIATE")
    try:
        conn.execute(_HISTORY_SCHEMA)
        if current_version(conn) >= migration.version:
            conn.execute("COMMIT")
            return False
        for stmt in migration.statements:
            conn.execute(stmt)
        conn.execute(
            "INSERT INTO schema_history (version, name, applied_on) "
            "VALUES (?, ?, ?)",
            (migration.version, migration.name,
             datetime.now(timezone.utc).isoformat()),
        )
        conn.execute("COMMIT")
    except sqlite3.Error:
        # SQLite may already have rolled back on its own (e.g. disk full).
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
    return True


def run_migrations(
    conn: sqlite3.Connection,
    migrations: tuple[Migration, ...] = MIGRATIONS,
) -> int:
    """Apply all outstanding migrations and return the new version.

    Parameters
    ----------
    conn:
        An open SQLite connection in autocommit mode
        (``isolation_level=None``); transactions are managed here.
    migrations:
        The migration registry.  Defaults to :data:`MIGRATIONS`.

    Returns
    -------
    int
        The schema version after migration.

    Raises
    ------
    MigrationError
        If the registry is invalid or a migration fails.  A failed
        migration is rolled back and left unrecorded.
    """
    _validate(migrations)
    try:
        current = current_version(conn)
    except sqlite3.Error as exc:
        raise MigrationError(f"Cannot read schema history: {exc}") from exc

    pending = sorted(
        (m for m in migrations if m.version > current),
        key=lambda m: m.version,
    )
    if not pending:
        logger.debug("[migrate] Schema already at v%d, nothing to do.", current)
        return current

    for migration in pending:
        try:
            applied = _apply(conn, migration)
        except sqlite3.Error as exc:
            raise MigrationError(
                f"Migration v{migration.version} ({migration.name}) failed: {exc}"
            ) from exc
        if applied:
            logger.info("[migrate] Applied migration v%d (%s)",
                        migration.version, migration.name)
        else:
            logger.debug("[migrate] Migration v%d already applied elsewhere.",
                         migration.version)

    return current_version(conn)
