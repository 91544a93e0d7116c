"""Environment loading helpers.

CLOCK_KANBAN_* overrides can live in .env files next to the vault or in the
user config directory. Values already exported in the shell always win:

  os.environ (pre-existing) > vault .env > user .env
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import dotenv_values

from .loader import get_xdg_config_home

logger = logging.getLogger(__name__)

ENV_PREFIX = "CLOCK_KANBAN_"


def _read_prefixed(path: Path) -> dict[str, str]:
    """Read CLOCK_KANBAN_* keys from a .env file, skipping unset values."""
    if not path.is_file():
        return {}
    return {
        str(key): str(value)
        for key, value in dotenv_values(path).items()
        if key is not None and value is not None and str(key).startswith(ENV_PREFIX)
    }


def load_layered_env(vault_dir: Path | None = None) -> dict[str, str]:
    """Load CLOCK_KANBAN_* variables from user and vault .env files.

    Args:
        vault_dir: vault root whose .env is read (defaults to cwd)

    Returns:
        The variables that were actually set in os.environ.
    """
    if vault_dir is None:
        vault_dir = Path.cwd()

    layered: dict[str, str] = {}
    layered.update(_read_prefixed(get_xdg_config_home() / "clock-kanban" / ".env"))
    layered.update(_read_prefixed(vault_dir / ".env"))

    applied: dict[str, str] = {}
    for key, value in layered.items():
        if key in os.environ:
            continue
        os.environ[key] = value
        applied[key] = value

    if applied:
        logger.debug(f"Loaded {len(applied)} variable(s) from .env files")
    return applied
