"""
Shared work queue and progress counter used by the upload workers.
"""
import threading
from collections import deque
from typing import Deque, Optional

from .models import FileTask


class UploadQueue:
    """Lock-protected FIFO of files awaiting upload.

    Filled completely before any worker starts; workers only pop.
    """

    def __init__(self):
        self._items: Deque[FileTask] = deque()
        self._lock = threading.Lock()

    def push(self, task: FileTask) -> None:
        with self._lock:
            self._items.append(task)

    def pop(self) -> Optional[FileTask]:
        """Remove and return the next task, or None once the queue is drained."""
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def empty(self) -> bool:
        with self._lock:
            return not self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class ProgressCounter:
    """Hands out unique, ascending sequence numbers for progress lines."""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value
