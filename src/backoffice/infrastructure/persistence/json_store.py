"""File layout and low-level IO for the JSON data directory.

Each collection lives in its own file (``skus.json``, ``orders.json``,
...) holding a JSON array of records.  Writes go to a temporary file in
the same directory and are moved into place with ``os.replace`` so a
crash never leaves a half-written collection behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import ClassVar

logger = logging.getLogger(__name__)

COLLECTIONS = (
    "skus",
    "carts",
    "orders",
    "parts_requests",
    "invoices",
    "bookings",
    "services",
)


class JsonStore:
    """One data directory.  All stores opened on the same directory share
    a single re-entrant lock."""

    _locks: ClassVar[dict[Path, threading.RLock]] = {}
    _registry_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = Path(data_dir).expanduser().resolve()
        with JsonStore._registry_lock:
            self._lock = JsonStore._locks.setdefault(self._data_dir, threading.RLock())

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def path(self, collection: str) -> Path:
        if collection not in COLLECTIONS:
            raise KeyError(f"Unknown collection: {collection}")
        return self._data_dir / f"{collection}.json"

    def read(self, collection: str) -> list[dict]:
        """Records of *collection*; a missing file is an empty collection."""
        path = self.path(collection)
        if not path.exists():
            return []
        return json.loads(path.read_text(encoding="utf-8"))

    def write(self, collection: str, records: list[dict]) -> None:
        path = self.path(collection)
        tmp_name = self._stage(collection, _dump(records))
        try:
            os.replace(tmp_name, path)
        except BaseException:
            _discard([tmp_name])
            raise
        logger.debug("Wrote %d %s records to %s", len(records), collection, path)

    def write_many(self, changes: Mapping[str, list[dict]]) -> None:
        """Write several collections so that either all of them or none
        of them are replaced.

        Every collection is staged to a temporary file first.  The files
        being replaced are kept in memory, and if any ``os.replace`` fails
        the collections already swapped in are put back before the error
        propagates.
        """
        staged: dict[str, str] = {}
        try:
            for collection, records in changes.items():
                staged[collection] = self._stage(collection, _dump(records))
            previous = {
                collection: self.path(collection).read_bytes()
                if self.path(collection).exists() else None
                for collection in staged
            }
        except BaseException:
            _discard(staged.values())
            raise

        replaced: list[str] = []
        try:
            for collection, tmp_name in staged.items():
                os.replace(tmp_name, self.path(collection))
                replaced.append(collection)
        except BaseException:
            _discard(tmp for c, tmp in staged.items() if c not in replaced)
            self._restore(replaced, previous)
            raise
        logger.debug("Wrote %s to %s", ", ".join(staged), self._data_dir)

    def _stage(self, collection: str, content: bytes) -> str:
        """Write *content* to a synced temp file beside the collection."""
        path = self.path(collection)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{collection}.", suffix=".tmp", dir=path.parent
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(content)
                fh.flush()
                os.fsync(fh.fileno())
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return tmp_name

    def _restore(self, collections: list[str], previous: dict[str, bytes | None]) -> None:
        for collection in collections:
            path = self.path(collection)
            try:
                content = previous[collection]
                if content is None:
                    path.unlink(missing_ok=True)
                else:
                    os.replace(self._stage(collection, content), path)
            except OSError:
                logger.exception("Could not restore %s after a failed write", path)
            else:
                logger.warning("Restored %s after a failed write", path)


def _dump(records: list[dict]) -> bytes:
    return (json.dumps(records, indent=2) + "\n").encode("utf-8")


def _discard(tmp_names: Iterable[str]) -> None:
    for tmp_name in tmp_names:
        Path(tmp_name).unlink(missing_ok=True)
