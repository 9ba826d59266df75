"""User configuration for pkgscout.

The configuration file is optional JSON, by default ``~/.pkgscout/config.json``::

    {
        "customPaths": {"brew": ["/custom/homebrew/bin/brew"]},
        "disabled": ["gem"],
        "timeout": 8000
    }

A missing file means defaults. An unreadable or malformed file is logged and
also means defaults - it never stops discovery from running.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pkgscout.models import ManagerId
from pkgscout.search import expand_path

logger = logging.getLogger(__name__)

CONFIG_DIR = expand_path("~/.pkgscout")
CONFIG_FILE = CONFIG_DIR / "config.json"
CONFIG_ENV_VAR = "PKGSCOUT_CONFIG"


def _known_manager(value) -> Optional[ManagerId]:
    try:
        return ManagerId(str(value).strip().lower())
    except ValueError:
        logger.debug("Ignoring unknown manager id in config: %r", value)
        return None


class UserConfig(BaseModel):
    """Custom search paths, disabled managers and a timeout override."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    custom_paths: dict[ManagerId, list[str]] = Field(
        default_factory=dict,
        alias="customPaths",
        description="Extra locations per manager, searched before common paths",
    )
    disabled: frozenset[ManagerId] = Field(
        default_factory=frozenset,
        description="Managers excluded from discovery and listing",
    )
    timeout: Optional[int] = Field(
        None,
        gt=0,
        description="Command timeout in milliseconds, overriding per-command defaults",
    )

    @field_validator("custom_paths", mode="before")
    @classmethod
    def _drop_unknown_paths(cls, value):
        if not isinstance(value, dict):
            return value
        cleaned: dict[ManagerId, list[str]] = {}
        for key, paths in value.items():
            manager = _known_manager(key)
            if manager is None:
                continue
            if isinstance(paths, str):
                paths = [paths]
            cleaned[manager] = paths
        return cleaned

    @field_validator("disabled", mode="before")
    @classmethod
    def _drop_unknown_disabled(cls, value):
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple, set, frozenset)):
            return value
        return frozenset(m for m in (_known_manager(v) for v in value) if m is not None)

    def paths_for(self, manager: ManagerId) -> list[str]:
        """Custom paths configured for a manager, in declared order."""
        return list(self.custom_paths.get(ManagerId(manager), []))

    def is_disabled(self, manager: ManagerId) -> bool:
        return ManagerId(manager) in self.disabled


def config_path(path: Union[str, Path, None] = None) -> Path:
    """Resolve which config file to read: explicit path, env var, then default."""
    if path is not None:
        return expand_path(str(path))
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return expand_path(env_path)
    return CONFIG_FILE


def load_user_config(path: Union[str, Path, None] = None) -> UserConfig:
    """
    Load the user configuration.

    Args:
        path: Config file to read (defaults to $PKGSCOUT_CONFIG or ~/.pkgscout/config.json)

    Returns:
        The parsed UserConfig, or defaults when the file is missing or corrupt
    """
    config_file = config_path(path)
    if not config_file.exists():
        logger.debug("No config file at %s; using defaults", config_file)
        return UserConfig()

    try:
        with open(config_file, encoding="utf-8") as f:
            data = json.load(f)
        return UserConfig.model_validate(data)
    except (ValueError, RecursionError, OSError, ValidationError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_file, e)
        return UserConfig()
