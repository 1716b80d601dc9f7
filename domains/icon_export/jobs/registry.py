"""Per-path table of the currently scheduled conversion job."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(eq=False)
class JobHandle:
    """Cancellation handle for one scheduled conversion of ``path``."""

    path: str
    created_at: float = field(default_factory=time.monotonic)
    _cancelled: threading.Event = field(default_factory=threading.Event, repr=False)
    _released: bool = field(default=False, repr=False)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds; True if cancelled meanwhile."""

        return self._cancelled.wait(timeout)

    def release(self) -> None:
        """Mark the handle finished; later cancels are harmless no-ops."""

        self._released = True

    @property
    def released(self) -> bool:
        return self._released


class DebounceRegistry:
    """
    Map of source path to the handle of its active job.

    All mutation goes through a single lock so that a replacement swaps the
    entry and hands the previous handle back to exactly one caller.
    """

    def __init__(self) -> None:
        self._handles: Dict[str, JobHandle] = {}
        self._lock = threading.Lock()

    def register_or_replace(self, path: str, handle: JobHandle) -> Optional[JobHandle]:
        """Install ``handle`` for ``path`` and return the one it displaced."""

        with self._lock:
            previous = self._handles.get(path)
            self._handles[path] = handle
        if previous is handle:
            return None
        return previous

    def remove(self, path: str, handle: Optional[JobHandle] = None) -> bool:
        """
        Drop the entry for ``path``.

        When ``handle`` is given the entry is only dropped if it is still that
        handle; a newer job's entry is left alone. Absent paths are a no-op.
        """

        with self._lock:
            current = self._handles.get(path)
            if current is None:
                return False
            if handle is not None and current is not handle:
                return False
            del self._handles[path]
            return True

    def get(self, path: str) -> Optional[JobHandle]:
        with self._lock:
            return self._handles.get(path)

    def snapshot(self) -> Dict[str, JobHandle]:
        with self._lock:
            return dict(self._handles)

    def pop_all(self) -> list[JobHandle]:
        with self._lock:
            handles = list(self._handles.values())
            self._handles.clear()
        return handles

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._handles

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)
