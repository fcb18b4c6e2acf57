"""
SQLite-backed token store.

Holds at most one token per Vault address.  The database file is created
on first use and brought up to the latest schema on every open.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .migrations import current_version, run_migrations

logger = logging.getLogger(__name__)

_SELECT_TOKEN = "SELECT token FROM vault_tokens WHERE vault_addr = ?"

_SELECT_RECORD = (
    "SELECT vault_addr, token, created_at FROM vault_tokens WHERE vault_addr = ?"
)

_UPSERT = """
INSERT INTO vault_tokens (vault_addr, token) VALUES (?, ?)
ON CONFLICT(vault_addr) DO UPDATE
    SET token = excluded.token, created_at = CURRENT_TIMESTAMP
"""

_DELETE = "DELETE FROM vault_tokens WHERE vault_addr = ?"


@dataclass
class CredentialRecord:
    """A stored token and when it was last written."""

    address: str
    token: str
    created_at: datetime


def _parse_timestamp(value: str) -> datetime:
    # CURRENT_TIMESTAMP is UTC, formatted "YYYY-MM-DD HH:MM:SS"
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


class Store:
    """
    Token store over a single SQLite connection.

    Use :meth:`open` rather than the constructor.  The store owns its
    connection; close it with :meth:`close` or by using the store as a
    context manager.  Database errors are raised as ``sqlite3.Error`` and
    never retried.

    Parameters
    ----------
    conn:
        An autocommit SQLite connection whose schema is already migrated.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn: Optional[sqlite3.Connection] = conn

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    def open(cls, path: str | os.PathLike) -> "Store":
        """Open (creating if absent) the database at *path* and migrate it.

        Raises
        ------
        MigrationError
            If the schema could not be brought up to date.
        sqlite3.Error
            If the file cannot be opened.
        """
        path = os.fspath(path)
        parent = os.path.dirname(os.path.abspath(path))
        os.makedirs(parent, exist_ok=True)

        # Autocommit: every statement is its own transaction, and the
        # migration runner issues BEGIN/COMMIT itself.
        conn = sqlite3.connect(path, timeout=10, isolation_level=None)
        try:
            run_migrations(conn)
        except Exception:
            conn.close()
            raise
        logger.debug("Opened token store at %s", path)
        return cls(conn)

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise sqlite3.ProgrammingError("Cannot operate on a closed store.")
        return self._conn

    @property
    def schema_version(self) -> int:
        """The schema version recorded in the database."""
        return current_version(self._get_conn())

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, address: str) -> Optional[str]:
        """
        Return the token stored for *address*, or None if there is none.

        Parameters
        ----------
        address:
            Vault server address, matched verbatim.
        """
        row = self._get_conn().execute(_SELECT_TOKEN, (address,)).fetchone()
        if row is None:
            return None
        return row[0]

    def get_record(self, address: str) -> Optional[CredentialRecord]:
        """Return the full record for *address*, or None."""
        row = self._get_conn().execute(_SELECT_RECORD, (address,)).fetchone()
        if row is None:
            return None
        return CredentialRecord(
            address=row[0],
            token=row[1],
            created_at=_parse_timestamp(row[2]),
        )

    def store(self, address: str, token: str) -> None:
        """
        Store *token* for *address*, replacing any existing token.

        Insert and replace happen in one statement, so an address never
        has more than one record.

        Parameters
        ----------
        address:
            Vault server address, used verbatim as the key.
        token:
            The token text.  May be empty.
        """
        self._get_conn().execute(_UPSERT, (address, token))

    def erase(self, address: str) -> None:
        """Delete the token for *address*.  No-op if there is none."""
        self._get_conn().execute(_DELETE, (address,))
