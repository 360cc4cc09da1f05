from __future__ import annotations

import queue
import threading
from typing import Any, Callable, Optional

from ..app_logger import get_logger

logger = get_logger("notifications.queue")

_STOP = object()


class OutboundQueue:
    """Fire-and-forget task channel drained by one daemon worker thread.

    The ledger path only enqueues; nothing here can block or fail a scan.
    """

    def __init__(self, *, name: str = "siabdul-outbound"):
        self._tasks: "queue.Queue[Any]" = queue.Queue()
        self._name = name
        self._worker: Optional[threading.Thread] = None
        self._start_lock = threading.Lock()

    def _ensure_worker(self) -> None:
        with self._start_lock:
            if self._worker is None or not self._worker.is_alive():
                self._worker = threading.Thread(target=self._run, name=self._name, daemon=True)
                self._worker.start()

    def submit(self, task: Callable[[], Any]) -> None:
        self._ensure_worker()
        self._tasks.put(task)

    def join(self) -> None:
        """Block until every submitted task has run."""
        self._tasks.join()

    def close(self) -> None:
        if self._worker is not None and self._worker.is_alive():
            self._tasks.put(_STOP)
            self._worker.join()

    def _run(self) -> None:
        while True:
            task = self._tasks.get()
            try:
                if task is _STOP:
                    return
                task()
            except Exception:
                logger.exception("outbound task failed")
            finally:
                self._tasks.task_done()
