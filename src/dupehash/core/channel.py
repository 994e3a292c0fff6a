"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/channel.py
Bounded FIFO queue with an explicit "closed and drained" state.

queue.Queue has no notion of closing, so close() enqueues a sentinel behind
the items already queued. The consumer that reaches the sentinel puts it back
before reporting closure, which lets any number of consumers observe the end
of the stream without blocking forever.
"""

import queue
import threading
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")

_CLOSED = object()


class QueueClosed(Exception):
    """Raised by put() on a closed queue and by get() on a closed, drained queue."""


class ClosableQueue(Generic[T]):
    """
    Multi-producer/multi-consumer bounded queue.

    - put() blocks while the queue is full (backpressure on the producer)
    - get() blocks while the queue is empty and open
    - get() raises QueueClosed once the queue is closed and drained
    """

    def __init__(self, maxsize: int):
        if maxsize < 1:
            raise ValueError("Queue capacity must be >= 1")
        # One extra slot keeps room for the sentinel
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize + 1)
        self._capacity = maxsize
        self._lock = threading.Lock()
        self._closed = False
        self._not_full = threading.Semaphore(maxsize)

    @property
    def maxsize(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def put(self, item: T) -> None:
        """Adds an item, blocking while the queue is at capacity."""
        if self.closed:
            raise QueueClosed("put() on a closed queue")
        self._not_full.acquire()
        with self._lock:
            if self._closed:
                self._not_full.release()
                raise QueueClosed("put() on a closed queue")
            self._queue.put_nowait(item)

    def get(self) -> T:
        """Removes and returns the next item, or raises QueueClosed when drained."""
        item = self._queue.get()
        if item is _CLOSED:
            self._queue.put_nowait(_CLOSED)
            raise QueueClosed("queue is closed and drained")
        self._not_full.release()
        return item

    def close(self) -> None:
        """Marks the end of the stream. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put_nowait(_CLOSED)

    def qsize(self) -> int:
        """Approximate number of queued items, not counting the sentinel."""
        size = self._queue.qsize()
        if self.closed and size:
            size -= 1
        return size

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except QueueClosed:
                return
