"""pipemaze.logging_utils
=========================

Logging setup for the command line and a small helper that records failed runs
as JSON lines so malformed inputs can be collected and inspected later.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .constants import FAIL_LOG
from .errors import PipeMazeError

_HANDLER_NAME = "pipemaze-cli"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Send ``pipemaze`` log records to stderr.

    INFO by default; ``verbose`` switches to DEBUG, which includes the
    per-tile trace of the loop walk. Calling it again replaces the handler
    installed by the previous call.
    """

    package_logger = logging.getLogger("pipemaze")
    for handler in list(package_logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            package_logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return package_logger


def log_failure(source: Optional[str], error: PipeMazeError, path: str | Path = FAIL_LOG) -> None:
    """Append a JSON line describing ``error`` to ``path``."""

    entry = {
        "time": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "source": source or "<sample>",
        "error": type(error).__name__,
        "message": error.args[0] if error.args else "",
        "context": {key: str(value) for key, value in (error.context or {}).items()},
    }
    with Path(path).open("a") as handle:
        handle.write(json.dumps(entry) + "\n")


__all__ = ["configure_logging", "log_failure"]
