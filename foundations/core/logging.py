"""Process-wide logging setup (stdout; the platform collects it)."""
from __future__ import annotations

import logging

from foundations.core.config import settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Apply LOG_LEVEL to the root logger. Safe to call more than once."""
    resolved = (level or settings.LOG_LEVEL).upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=_FORMAT)
    root.setLevel(resolved)
    logging.getLogger("foundations").setLevel(resolved)
