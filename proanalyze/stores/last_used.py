"""Persists the most recently analysed source identifier."""

from __future__ import annotations

import json
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Optional

from ..logging import get_logger

_STORE_VERSION = 1
_ENV_STATE_DIR = "PROANALYZE_STATE_DIR"

logger = get_logger("stores")


def default_store_path() -> Path:
    """``$PROANALYZE_STATE_DIR/last_used.json`` or ``~/.proanalyze/last_used.json``."""
    override = os.getenv(_ENV_STATE_DIR)
    base = Path(override).expanduser() if override else Path.home() / ".proanalyze"
    return base / "last_used.json"


class LastUsedStore:
    """Remembers one identifier (a repository URL or local path) across runs.

    Purely advisory: unreadable or foreign files read as "nothing stored" and
    write failures are logged, never raised.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path if path is not None else default_store_path()

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> Optional[str]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError):
            logger.debug("Ignoring unreadable last-used store at %s", self._path)
            return None
        if not isinstance(data, dict) or data.get("version") != _STORE_VERSION:
            return None
        identifier = data.get("identifier")
        if not isinstance(identifier, str) or not identifier.strip():
            return None
        return identifier

    def remember(self, identifier: str) -> None:
        identifier = identifier.strip()
        if not identifier:
            return
        payload = {
            "version": _STORE_VERSION,
            "identifier": identifier,
            "updated_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as exc:
            logger.warning("Unable to persist last-used identifier to %s: %s", self._path, exc)

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return


__all__ = ["LastUsedStore", "default_store_path"]
