"""Logging setup for the pkgscout command.

Library modules only create ``logger = logging.getLogger(__name__)``; this is
called once by the CLI. Level precedence: --verbose flag, then the
PKGSCOUT_LOG_LEVEL environment variable, then WARNING.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV_VAR = "PKGSCOUT_LOG_LEVEL"


def resolve_level(level: Optional[str] = None) -> int:
    """Numeric log level from an explicit name, the environment, or WARNING."""
    name = (level or os.environ.get(LOG_LEVEL_ENV_VAR) or "WARNING").upper()
    numeric = logging.getLevelName(name)
    return numeric if isinstance(numeric, int) else logging.WARNING


def setup_logging(level: Optional[str] = None) -> None:
    """Send pkgscout log records to stderr through rich."""
    numeric_level = resolve_level(level)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=numeric_level <= logging.DEBUG,
        show_path=numeric_level <= logging.DEBUG,
        markup=False,
    )
    handler.setLevel(numeric_level)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)
