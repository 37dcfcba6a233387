from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper() or "INFO")
        if not isinstance(resolved, int):
            resolved = logging.INFO
    else:
        resolved = level

    root = logging.getLogger()
    root.setLevel(resolved)

    for handler in root.handlers:
        if getattr(handler, "_auditsearch", False):
            handler.setLevel(resolved)
            return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
    handler.setLevel(resolved)
    handler._auditsearch = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # The search clients log every request at INFO.
    for noisy in ("opensearch", "elastic_transport", "elasticsearch"):
        logging.getLogger(noisy).setLevel(max(resolved, logging.WARNING))
