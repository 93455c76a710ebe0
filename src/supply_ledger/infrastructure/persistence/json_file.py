"""A JSON document on disk shared by every process that opens it.

Writers hold an exclusive lock file (``<name>.lock``) from the moment they
read the document until the new version has replaced it, so two CLI runs
against the same data directory cannot overwrite each other's changes.
Each write goes to a temporary file that then replaces the document; a
reader sees either the old version or the new one, never half of it.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator

from filelock import FileLock, Timeout

from supply_ledger.domain.exceptions import PersistenceFailureError

LOCK_TIMEOUT_SECONDS = 30.0


class JsonFile:

    def __init__(
        self,
        path: Path,
        label: str,
        empty: Callable[[], Any],
        lock_timeout: float = LOCK_TIMEOUT_SECONDS,
    ) -> None:
        self.path = path
        self._label = label
        self._thread_lock = threading.RLock()
        self._file_lock = FileLock(
            str(path.with_name(path.name + ".lock")), timeout=lock_timeout
        )
        path.parent.mkdir(parents=True, exist_ok=True)
        with self.locked():
            if not path.exists():
                self.write(empty())

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Exclusive access across threads and processes."""
        with self._thread_lock:
            try:
                self._file_lock.acquire()
            except Timeout as exc:
                raise PersistenceFailureError(
                    f"Timed out waiting for the {self._label} lock {self._file_lock.lock_file}"
                ) from exc
            try:
                yield
            finally:
                self._file_lock.release()

    def read(self) -> Any:
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PersistenceFailureError(
                f"Cannot read {self._label} {self.path}: {exc}"
            ) from exc

    def write(self, data: Any) -> None:
        """Replace the document. Callers hold ``locked()``."""
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(json.dumps(data, indent=2) + "\n")
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise PersistenceFailureError(
                f"Cannot write {self._label} {self.path}: {exc}"
            ) from exc
