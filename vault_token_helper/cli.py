"""
`vault-token-helper` command-line interface.

Vault runs the configured token helper with a single argument and the
server address in ``VAULT_ADDR``.

Commands
--------
vault-token-helper install [--force] [--interactive]  -- write ~/.vault
vault-token-helper get                                -- print the stored token
vault-token-helper store [TOKEN]                      -- store TOKEN (or stdin)
vault-token-helper erase                              -- erase the stored token
"""

from __future__ import annotations

import argparse
import logging
import sqlite3
import sys
from typing import Optional

from .config import Config
from .install import InstallError, install
from .logging_setup import setup_logger
from .migrations import MigrationError
from .store import Store

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Sub-command handlers
# ---------------------------------------------------------------------------

def _cmd_install(args: argparse.Namespace) -> None:
    """Configure Vault to use the token helper."""
    install(force=args.force, interactive=args.interactive)


def _cmd_get(args: argparse.Namespace, store: Store) -> None:
    """Print the stored token, if any."""
    token = store.get(args.vault_addr)
    if token is None:
        logger.debug("Token not found for %s", args.vault_addr)
        return
    logger.debug("Token found for %s", args.vault_addr)
    # Vault won't accept a trailing newline.
    sys.stdout.write(token)
    sys.stdout.flush()


def _cmd_store(args: argparse.Namespace, store: Store) -> None:
    """Store a token given on the command line or read from stdin."""
    token = args.token
    if token is None:
        token = sys.stdin.buffer.read().decode("utf-8")
    store.store(args.vault_addr, token)
    logger.debug("Token stored for %s", args.vault_addr)


def _cmd_erase(args: argparse.Namespace, store: Store) -> None:
    """Erase the stored token."""
    store.erase(args.vault_addr)
    logger.debug("Token erased for %s", args.vault_addr)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vault-token-helper",
        description="Vault token helper that stores tokens in SQLite.",
    )
    parser.add_argument("--vault-addr", default=None,
                        help="The address of the Vault server "
                             "(env: VAULT_ADDR)")
    parser.add_argument("--db", dest="db_path", metavar="DB", default=None,
                        help="The path to the SQLite database "
                             "(env: VAULT_TOKEN_HELPER_DB)")
    parser.add_argument("-l", "--log-level", default=None,
                        help="Verbosity of log messages: trace, debug, info, "
                             "warn, error or off "
                             "(env: VAULT_TOKEN_HELPER_LOG_LEVEL)")
    parser.add_argument("--config", default=None,
                        help="Path to a YAML config file")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    # --- install ---
    install_p = subparsers.add_parser(
        "install", help="Configure Vault to use the token helper")
    install_p.add_argument("-f", "--force", action="store_true",
                           help="Overwrite the existing configuration")
    install_p.add_argument("-i", "--interactive", action="store_true",
                           help="Prompt before overwriting the existing "
                                "configuration")
    install_p.set_defaults(func=_cmd_install, needs_store=False)

    # --- get ---
    get_p = subparsers.add_parser("get", help="Show a stored token")
    get_p.set_defaults(func=_cmd_get, needs_store=True)

    # --- store ---
    store_p = subparsers.add_parser(
        "store", help="Store a token",
        description="Store a token. If no token is provided, the token "
                    "is read from standard input.")
    store_p.add_argument("token", nargs="?", default=None,
                         help="The token to store")
    store_p.set_defaults(func=_cmd_store, needs_store=True)

    # --- erase ---
    erase_p = subparsers.add_parser("erase", help="Erase a stored token")
    erase_p.set_defaults(func=_cmd_erase, needs_store=True)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for ``vault-token-helper``.

    Parameters
    ----------
    argv:
        Argument list without the program name.  Defaults to sys.argv.

    Returns
    -------
    int
        Process exit status: 0 on success, 1 on any failure.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    cfg = Config.load(args.config)

    # CLI overrides
    try:
        setup_logger(args.log_level or cfg.LOG_LEVEL)
    except ValueError as exc:
        print(f"vault-token-helper: {exc}", file=sys.stderr)
        return 1
    args.vault_addr = args.vault_addr or cfg.VAULT_ADDR

    try:
        if not args.needs_store:
            args.func(args)
            return 0

        db_path = args.db_path or cfg.resolve_db_path()
        logger.debug("Using database %s", db_path)
        with Store.open(db_path) as store:
            args.func(args, store)
    except (sqlite3.Error, MigrationError, InstallError, OSError,
            UnicodeDecodeError) as exc:
        # Printed directly so failures show even with "-l off".
        print(f"vault-token-helper: {exc}", file=sys.stderr)
        logger.debug("Command failed", exc_info=True)
        return 1
    return 0


def run() -> None:
    """Console-script wrapper around :func:`main`."""
    sys.exit(main())
