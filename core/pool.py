"""Shared state for one target run: username pool, password queue, producer."""

import queue
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from core.models import Candidate


class ReadWriteLock:
    """Multiple-reader / single-writer lock, writers preferred."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self):
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            self._waiting_writers += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class CredentialPool:
    """Ordered usernames shared by all workers of a target. Only ever shrinks."""

    def __init__(self, usernames: Iterable[str] = ()):
        self._users: List[str] = list(usernames)
        self._lock = ReadWriteLock()

    def snapshot(self) -> Tuple[str, ...]:
        with self._lock.read():
            return tuple(self._users)

    def prune(self, matched: Iterable[str]) -> int:
        """Remove matched usernames and return how many remain.

        Entries are removed by name, so a user already pruned by another
        worker is simply ignored.
        """
        drop = set(matched)
        with self._lock.write():
            if drop:
                self._users = [u for u in self._users if u not in drop]
            return len(self._users)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._users)

    def __bool__(self) -> bool:
        return len(self) > 0


class WorkQueue:
    """FIFO of candidates that knows when its producer has finished."""

    def __init__(self):
        self._q: "queue.SimpleQueue[Candidate]" = queue.SimpleQueue()
        self._closed = threading.Event()

    def push(self, item: Candidate) -> None:
        self._q.put(item)

    def pop(self, timeout: float = 0) -> Optional[Candidate]:
        """Return the next item, or None if none arrived within timeout."""
        try:
            if timeout > 0:
                return self._q.get(timeout=timeout)
            return self._q.get_nowait()
        except queue.Empty:
            return None

    def close(self) -> None:
        self._closed.set()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def drained(self) -> bool:
        return self.closed and self._q.empty()

    def __len__(self) -> int:
        return self._q.qsize()


def iter_wordlist(path: str) -> Iterator[str]:
    """Yield wordlist lines, skipping blank and non-UTF-8 lines."""
    with Path(path).open("rb") as fh:
        for raw in fh:
            try:
                line = raw.decode("utf-8").rstrip("\r\n")
            except UnicodeDecodeError:
                continue
            if line:
                yield line


def produce(path: str, work: WorkQueue, stop: threading.Event) -> int:
    """Stream the password wordlist into the queue, closing it when done."""
    count = 0
    try:
        for line in iter_wordlist(path):
            if stop.is_set():
                break
            work.push(Candidate.from_line(line))
            count += 1
    finally:
        work.close()
    return count
