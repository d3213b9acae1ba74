"""
journey.core.filelock — Advisory lock around whole-file rewrites.

The journal collection is stored as one JSON document, so every
mutation is load → change → rewrite.  ``FileLock`` keeps two processes
from interleaving those cycles.  The lock is a ``<file>.lock`` sidecar
created with ``O_CREAT | O_EXCL``; no third-party dependency.

Usage::

    with FileLock(journals_path, timeout=2.0):
        journals = store.load()
        journals.append(entry)
        store.save(journals)
"""

from __future__ import annotations

import logging
import os
import sys
import time
from pathlib import Path
from types import TracebackType
from typing import Optional, Type

log = logging.getLogger(__name__)

_IS_WINDOWS = sys.platform == "win32"


class FileLock:
    """Sidecar-file advisory lock.

    Parameters
    ----------
    path : Path
        The file being protected.  The lock lives at ``path.lock``.
    timeout : float
        Seconds to wait before giving up with ``TimeoutError``.
    poll : float
        Seconds between attempts.
    """

    def __init__(self, path: Path, timeout: float = 5.0, poll: float = 0.05) -> None:
        self.lock_path = Path(f"{path}.lock")
        self.timeout = timeout
        self.poll = poll
        self._fd: Optional[int] = None

    @property
    def locked(self) -> bool:
        return self._fd is not None

    def __enter__(self) -> "FileLock":
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.release()

    def acquire(self) -> None:
        """Block until the lock file is ours or *timeout* expires.

        A lock file older than twice the timeout is treated as left
        behind by a dead process and removed.
        """
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        deadline = time.monotonic() + self.timeout
        while True:
            try:
                self._fd = os.open(
                    str(self.lock_path), os.O_CREAT | os.O_EXCL | os.O_WRONLY
                )
                return
            except FileExistsError:
                pass
            except PermissionError:
                # Windows reports a held O_EXCL file this way
                if not _IS_WINDOWS:
                    raise

            if time.monotonic() >= deadline:
                if self._break_if_stale():
                    continue
                raise TimeoutError(
                    f"Could not acquire lock on {self.lock_path} within {self.timeout}s"
                )
            time.sleep(self.poll)

    def release(self) -> None:
        if self._fd is None:
            return
        try:
            os.close(self._fd)
        except OSError:
            pass
        self._fd = None
        self._unlink()

    def _break_if_stale(self) -> bool:
        try:
            age = time.time() - self.lock_path.stat().st_mtime
        except OSError:
            # vanished between attempts; just retry
            return True
        if age <= self.timeout * 2:
            return False
        log.warning("Breaking stale lock (%.1fs old): %s", age, self.lock_path)
        self._unlink()
        return True

    def _unlink(self) -> None:
        try:
            self.lock_path.unlink()
        except OSError:
            pass
