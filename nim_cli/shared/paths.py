"""Config file location helpers.

The config file is looked up at ``$NIMCLI_CONFIG_PATH`` when set, otherwise as
``config.yaml`` inside ``$NIMCLI_CONFIG_DIR`` (default ``~/.nimagent``).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

DEFAULT_CONFIG_DIR = "~/.nimagent"
DEFAULT_CONFIG_FILE = "config.yaml"

CONFIG_DIR_ENV = "NIMCLI_CONFIG_DIR"
CONFIG_FILE_ENV = "NIMCLI_CONFIG_PATH"


def resolve_path(path_str: str | Path) -> Path:
    """Expand ``~`` and environment variables in a path."""
    return Path(os.path.expandvars(str(path_str))).expanduser()


def get_config_dir(create: bool = False, env: Mapping[str, str] | None = None) -> Path:
    """Return the configuration directory, optionally creating it."""
    env = env or os.environ
    path = resolve_path(env.get(CONFIG_DIR_ENV, DEFAULT_CONFIG_DIR))
    if create:
        path.mkdir(parents=True, exist_ok=True)
    return path


def default_config_path(create_parents: bool = False, env: Mapping[str, str] | None = None) -> Path:
    """Return the config file path, honouring ``NIMCLI_CONFIG_PATH`` first."""
    env = env or os.environ
    override = env.get(CONFIG_FILE_ENV)
    if not override:
        return get_config_dir(create=create_parents, env=env) / DEFAULT_CONFIG_FILE
    path = resolve_path(override)
    if create_parents:
        path.parent.mkdir(parents=True, exist_ok=True)
    return path
