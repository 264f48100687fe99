"""Run a numbered set of work chunks, sequentially or on threads."""

from __future__ import annotations

import threading
from typing import Callable


class Workload:
    """A number of chunks processed by a worker function.

    The worker is called as ``worker(chunk_index, thread_number)`` and returns
    whether the chunk succeeded.
    """

    def __init__(self, worker: Callable[[int, int], bool], chunks: int) -> None:
        self.worker = worker
        self.chunks = chunks

    def _finish_sequential(self) -> bool:
        return all(self.worker(i, 0) for i in range(self.chunks))

    def _finish_parallel(self, thread_count: int) -> bool:
        lock = threading.Lock()
        state = {"next": 0, "result": True}

        def take() -> int:
            with lock:
                index = state["next"]
                state["next"] += 1
                return index

        def run(thread_no: int) -> None:
            index = take()
            while state["result"] and index < self.chunks:
                if not self.worker(index, thread_no):
                    state["result"] = False
                index = take()

        threads = [threading.Thread(target=run, args=(n,)) for n in range(thread_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return state["result"]

    def finish(self, thread_count: int) -> bool:
        """Process all chunks; return False if any failed or the thread count is invalid."""
        if not self.chunks:
            return True
        if thread_count == 1 or self.chunks == 1:
            return self._finish_sequential()
        if thread_count > 1:
            return self._finish_parallel(min(thread_count, self.chunks))
        return False