"""
JSON collection files.

A collection is a single JSON array on disk (``users.json``, ``posts.json``).
``DocumentStore`` loads and stores the whole array; ``transaction()`` holds the
collection lock across one load → mutate → store cycle so concurrent
mutations are applied one after another.

Writes go to a temp file in the same directory and are moved into place with
``os.replace``, so lock-free readers see either the previous or the new
content, never a half-written file.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator
import json
import logging
import os
import tempfile
import threading

from postboard.domain.errors import PersistenceError

logger = logging.getLogger(__name__)

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    """Return the lock shared by every store pointing at ``path``."""
    key = path.resolve()
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock


def _fsync_dir(dir_path: Path) -> None:
    try:
        fd = os.open(str(dir_path), os.O_DIRECTORY)
    except (AttributeError, OSError):
        return
    try:
        os.fsync(fd)
    except OSError:
        pass
    finally:
        os.close(fd)


class DocumentStore:
    """Whole-collection persistence for one JSON file."""

    def __init__(self, path: Path | str):
        self._path = Path(path)
        self.lock = _lock_for(self._path)

    @property
    def path(self) -> Path:
        return self._path

    def __repr__(self) -> str:
        return f"DocumentStore({str(self._path)!r})"

    def load(self) -> list[dict[str, Any]]:
        """Read every record; a missing, unreadable or malformed file is an empty collection."""
        return self._read(strict=False)

    def _read(self, *, strict: bool) -> list[dict[str, Any]]:
        if not self._path.exists():
            return []
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            # an existing file that cannot be read must not be replaced by a write
            if strict:
                raise PersistenceError(f"Cannot read collection {self._path}: {exc}") from exc
            logger.warning("Collection %s unreadable, treating as empty: %s", self._path, exc)
            return []
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Collection %s malformed, treating as empty: %s", self._path, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Collection %s is not a JSON array, treating as empty", self._path)
            return []
        return data

    def store(self, records: list[dict[str, Any]]) -> None:
        """Replace the file content with ``records``; raises PersistenceError on failure."""
        try:
            payload = json.dumps(records, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Cannot serialize collection {self._path.name}: {exc}") from exc

        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=self._path.name + ".", suffix=".tmp", dir=str(self._path.parent))
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
            tmp_path = None
        except OSError as exc:
            raise PersistenceError(f"Cannot write collection {self._path}: {exc}") from exc
        finally:
            if tmp_path is not None:
                try:
                    tmp_path.unlink()
                except OSError:
                    logger.warning("Could not remove temp file %s", tmp_path)
        _fsync_dir(self._path.parent)

    @contextmanager
    def transaction(self) -> Iterator[list[dict[str, Any]]]:
        """
        Yield the current records under the collection lock and store them on
        normal exit. An exception inside the block skips the store. An existing
        file that cannot be read raises PersistenceError instead of being
        overwritten.
        """
        with self.lock:
            records = self._read(strict=True)
            yield records
            self.store(records)
