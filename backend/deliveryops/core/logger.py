"""
Logging setup shared by the application.
"""

import logging
import sys

from deliveryops.core.config import get_settings

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root = logging.getLogger("deliveryops")
    root.addHandler(handler)
    root.setLevel(get_settings().LOG_LEVEL.upper())
    root.propagate = False
    _configured = True


def setup_logger(name: str) -> logging.Logger:
    """Return a logger under the application namespace."""
    _configure_root()
    if not name.startswith("deliveryops"):
        name = f"deliveryops.{name}"
    return logging.getLogger(name)


logger = setup_logger("deliveryops")
