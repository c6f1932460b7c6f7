"""
Ledger backends — byte-keyed get/put storage underneath the record store.

The ledger contract is deliberately small:

- ``put(key, value)`` stores ``value`` bytes under ``key`` and raises on fault.
- ``get(key)`` returns the stored bytes, or ``None`` when nothing is stored.

Absence is signaled by ``None`` (or empty bytes), never by an exception.
The ledger performs no encryption of its own.
"""
import os
import base64
import logging
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

import orjson

logger = logging.getLogger("record_vault.ledger")

_FILE_FORMAT_VERSION = 1


class Ledger(ABC):
    """Abstract byte-keyed ledger."""

    @abstractmethod
    def put(self, key: str, value: bytes) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the bytes stored under key, or None."""


class MemoryLedger(Ledger):
    """In-process ledger backed by a dict.

    Used as the default backend and in tests.
    """

    def __init__(self) -> None:
        self._state: dict[str, bytes] = {}

    def put(self, key: str, value: bytes) -> None:
        self._state[key] = bytes(value)

    def get(self, key: str) -> Optional[bytes]:
        return self._state.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._state

    def __len__(self) -> int:
        return len(self._state)


class FileLedger(Ledger):
    """Ledger persisted as a single JSON snapshot file.

    Format::

        {"version": 1, "state": {"<key>": "<base64 bytes>", ...}}

    Every ``put`` rewrites the snapshot through a temporary file and
    ``os.replace``, so a crash never leaves a half-written ledger behind.
    Puts are serialized by an instance lock.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._state: dict[str, bytes] = self._load()
        logger.info(
            "File ledger opened at %s with %d record(s)",
            self._path, len(self._state),
        )

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, bytes]:
        if not self._path.exists():
            return {}
        raw = self._path.read_bytes()
        if not raw:
            return {}
        parsed = orjson.loads(raw)
        version = parsed.get("version")
        if version != _FILE_FORMAT_VERSION:
            raise ValueError(
                f"Unsupported ledger file version {version!r} in {self._path}"
            )
        return {
            key: base64.b64decode(value)
            for key, value in parsed.get("state", {}).items()
        }

    def _dump(self, state: dict[str, bytes]) -> None:
        document = {
            "version": _FILE_FORMAT_VERSION,
            "state": {
                key: base64.b64encode(value).decode("ascii")
                for key, value in state.items()
            },
        }
        data = orjson.dumps(document, option=orjson.OPT_SORT_KEYS)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as fp:
                fp.write(data)
            os.replace(tmp_name, self._path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def put(self, key: str, value: bytes) -> None:
        with self._lock:
            state = dict(self._state)
            state[key] = bytes(value)
            self._dump(state)
            # only publish the new state once it is on disk
            self._state = state

    def get(self, key: str) -> Optional[bytes]:
        return self._state.get(key)


def build_ledger(path: Union[str, Path, None] = None) -> Ledger:
    """Return a FileLedger for path, or a MemoryLedger when path is None."""
    if path:
        return FileLedger(path)
    logger.info("Using in-memory ledger")
    return MemoryLedger()
