"""Persisted "has launched before" flag.

A single durable boolean: the marker file exists once the app has started at
least once. Read once at startup, written once on a fresh install.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class LaunchFlag:
    def __init__(self, path: Path | str):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def has_launched(self) -> bool:
        return self._path.exists()

    def mark_launched(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text("1", encoding="utf-8")

    def reset(self) -> None:
        """Forget the flag; the next start is treated as a fresh install."""
        self._path.unlink(missing_ok=True)
        logger.info("Reset launch flag at %s", self._path)
