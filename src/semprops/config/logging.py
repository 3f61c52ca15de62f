"""Root logger setup for the CLI and the HTTP app."""

from __future__ import annotations

import logging
import os

from .errors import ConfigurationError

LOG_LEVEL_VAR = "SEMPROPS_LOG_LEVEL"
# httpx logs every request at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def _level_from_env(default: int) -> int:
    name = os.getenv(LOG_LEVEL_VAR)
    if name is None or not name.strip():
        return default
    level = logging.getLevelNamesMapping().get(name.strip().upper())
    if level is None:
        raise ConfigurationError(
            f"{LOG_LEVEL_VAR} must be a logging level name, got {name!r}", variable=LOG_LEVEL_VAR
        )
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Configure the root logger; ``SEMPROPS_LOG_LEVEL`` applies when ``level`` is omitted.

    Pass ``force=True`` to replace handlers installed earlier, e.g. by pytest.
    """

    resolved = level if level is not None else _level_from_env(logging.INFO)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
