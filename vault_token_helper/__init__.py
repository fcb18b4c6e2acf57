"""
vault_token_helper — a Vault token helper backed by SQLite.

Public API for library usage::

    from vault_token_helper import Store

    with Store.open("/tmp/tokens.db") as store:
        store.store("https://vault.example.com", "s.abc123")
        token = store.get("https://vault.example.com")
"""

from .hcl import escape_quoted_string
from .migrations import MigrationError
from .store import CredentialRecord, Store

__version__ = "0.1.0"

__all__ = [
    "CredentialRecord",
    "MigrationError",
    "Store",
    "escape_quoted_string",
]
