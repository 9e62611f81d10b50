"""Console progress for row completion."""

from __future__ import annotations

import queue
import sys
import threading
from typing import Optional, TextIO

_DONE = object()


class ProgressReporter:
    """Consume one signal per finished row and print a running percentage.

    Signals may arrive from any number of worker threads. A single consumer
    thread owns the count and the output stream, so the displayed value only
    ever grows.
    """

    def __init__(self, total: int, stream: Optional[TextIO] = None) -> None:
        self.total = total
        self.stream = stream if stream is not None else sys.stdout
        self.completed = 0
        self.percentages: list[int] = []
        self._queue: queue.Queue = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._closed = False

    def start(self) -> "ProgressReporter":
        if self._thread is None:
            self._thread = threading.Thread(target=self._consume, name="progress", daemon=True)
            self._thread.start()
        return self

    def signal(self) -> None:
        self._queue.put(None)

    def close(self) -> None:
        """Stop the consumer after it has drained every pending signal."""

        if self._closed:
            return
        self._closed = True
        self._queue.put(_DONE)
        if self._thread is not None:
            self._thread.join()
        else:
            self._consume()

    def _consume(self) -> None:
        while True:
            item = self._queue.get()
            if item is _DONE:
                break
            self.completed += 1
            percent = int(100 * (self.completed / self.total)) if self.total else 100
            self.percentages.append(percent)
            print(f"\r{self.completed}/{self.total} ({percent}%)", end="", file=self.stream, flush=True)
        print(file=self.stream)

    def __enter__(self) -> "ProgressReporter":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
