"""Logging helpers for ToneLab."""

from __future__ import annotations

import logging
import os
from typing import Optional

from ..config import LOG_LEVEL_ENV_VAR

_ROOT_NAME = "tonelab"
_LOGGER: Optional[logging.Logger] = None


def _configure_root() -> logging.Logger:
    root = logging.getLogger(_ROOT_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        handler.setFormatter(formatter)
        root.addHandler(handler)
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or the child logger *name* below it.

    The package logger gets a stream handler on first use; its level comes
    from ``TONELAB_LOG_LEVEL`` and defaults to ``INFO``.
    """

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = _configure_root()
    if name is None or name == _ROOT_NAME:
        return _LOGGER
    if name.startswith(_ROOT_NAME + "."):
        name = name[len(_ROOT_NAME) + 1 :]
    return _LOGGER.getChild(name)
