"""Credential stores consulted by the auth interceptor.

A store maps entry names (e.g. ``"authToken"``) to string values.  Each
entry is a single atomic value: readers observe either the value before a
write or the value after it, never a partial state.

``MemoryCredentialStore``
    Process-local dict; used by tests and embedding applications.
``FileCredentialStore``
    JSON document on disk (``~/.meshctl/credentials.json`` by default);
    used by the CLI so a token survives between invocations.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class CredentialStore(ABC):
    """Abstract base class for a named-entry credential store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under *key*, or ``None`` when absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete *key*.  Removing a missing key is a no-op."""


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------

class MemoryCredentialStore(CredentialStore):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._entries: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def set(self, key: str, value: str) -> None:
        self._entries[key] = value

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)


# ---------------------------------------------------------------------------
# File-backed store
# ---------------------------------------------------------------------------

class FileCredentialStore(CredentialStore):
    """Credential entries persisted as a flat JSON object.

    Writes go to a temporary file in the same directory which is then
    renamed over the original, so a concurrent reader never sees a
    half-written document.

    The auth interceptor calls :meth:`get` synchronously on every request,
    so the parsed document is cached against the file's inode, size and
    mtime.  An unchanged file costs one ``stat`` per lookup; a token written
    by another process is still picked up on the next request.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._cached: tuple[tuple[int, int, int], dict[str, str]] | None = None

    def _load(self) -> dict[str, str]:
        """Read the document.  Returns ``{}`` if missing/corrupt."""
        try:
            st = self.path.stat()
        except FileNotFoundError:
            self._cached = None
            return {}
        except OSError as exc:
            logger.warning("Ignoring unreadable credential file %s: %s", self.path, exc)
            return {}
        stamp = (st.st_ino, st.st_size, st.st_mtime_ns)
        if self._cached is not None and self._cached[0] == stamp:
            return dict(self._cached[1])

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable credential file %s: %s", self.path, exc)
            raw = {}
        if not isinstance(raw, dict):
            raw = {}
        entries = {k: v for k, v in raw.items() if isinstance(v, str)}
        self._cached = (stamp, entries)
        return dict(entries)

    def _save(self, entries: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".credentials-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(entries, handle, indent=2)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        entries = self._load()
        entries[key] = value
        self._save(entries)

    def remove(self, key: str) -> None:
        entries = self._load()
        if key not in entries:
            return
        del entries[key]
        self._save(entries)
