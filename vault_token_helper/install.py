"""
Installer — points Vault's ``token_helper`` setting at this tool.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Callable, Optional

from .hcl import escape_quoted_string

logger = logging.getLogger(__name__)

_HEADER = "# This file was created by vault-token-helper."


class InstallError(Exception):
    """Raised when the Vault configuration file cannot be written."""


def vault_config_path() -> str:
    """Return the path to the Vault configuration file.

    ``VAULT_CONFIG_PATH`` if set, otherwise ``~/.vault`` (the same lookup
    the Vault CLI performs).
    """
    config_path = os.environ.get("VAULT_CONFIG_PATH")
    if config_path:
        return config_path
    home = os.path.expanduser("~")
    if home == "~":
        raise InstallError("Could not determine home directory")
    return os.path.join(home, ".vault")


def current_executable() -> str:
    """Return the absolute path of the running ``vault-token-helper``."""
    return os.path.abspath(sys.argv[0])


def _ask_overwrite() -> bool:
    try:
        choice = input(
            "Vault configuration file already exists. Overwrite? [y/N] "
        ).strip().lower()
    except EOFError:
        # No answer on a closed or exhausted stdin counts as "no".
        return False
    return choice in ("y", "yes")


def install(
    force: bool = False,
    interactive: bool = False,
    config_path: Optional[str] = None,
    exe_path: Optional[str] = None,
    confirm: Optional[Callable[[], bool]] = None,
) -> str:
    """
    Write a Vault configuration file that uses this tool as token helper.

    Parameters
    ----------
    force:
        Overwrite an existing configuration file without asking.
    interactive:
        Ask before overwriting an existing file.
    config_path:
        Target file.  Defaults to :func:`vault_config_path`.
    exe_path:
        Path written as the helper.  Defaults to the running executable.
    confirm:
        Prompt used in interactive mode.  Defaults to reading stdin.

    Returns
    -------
    str
        The path of the written configuration file.

    Raises
    ------
    InstallError
        If the file exists and overwriting was not allowed.
    """
    path = config_path or vault_config_path()
    exe = exe_path or current_executable()

    if not force and os.path.exists(path):
        ask = confirm or _ask_overwrite
        if not interactive or not ask():
            raise InstallError("Vault configuration file already exists")

    with open(path, "w", encoding="utf-8") as f:
        f.write(f"{_HEADER}\n")
        f.write(f'token_helper = "{escape_quoted_string(exe)}"\n')

    logger.info("Wrote Vault configuration to %s", path)
    return path
