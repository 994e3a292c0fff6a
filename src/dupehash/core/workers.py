"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/workers.py
Hash worker pool — W threads pulling FileHash requests from the request queue
and pushing fingerprinted results onto the reply queue.

SHUTDOWN PROTOCOL
-----------------
  • Each worker exits once the request queue is closed and drained
  • A supervisor thread joins every worker, then closes the reply queue once
  • Files that cannot be read are dropped: no reply, no retry, counted per worker
"""

import logging
import threading
from pathlib import Path
from typing import List, Optional

from dupehash.core.channel import ClosableQueue
from dupehash.core.hasher import ReadError
from dupehash.core.interfaces import Hasher
from dupehash.core.models import FileHash

logger = logging.getLogger(__name__)


class HashWorker:
    """
    A single hashing worker. Its counters are only touched by its own thread
    and are read by the pool after the thread has been joined.
    """

    def __init__(self, requests: ClosableQueue, replies: ClosableQueue, hasher: Hasher):
        self.requests = requests
        self.replies = replies
        self.hasher = hasher
        self.processed = 0
        self.read_errors = 0
        self.failed_paths: List[str] = []

    def hash_request(self, request: FileHash) -> Optional[FileHash]:
        """
        Fills in the fingerprint of a request.
        Returns None when the file could not be read.
        """
        request.path = Path(request.path).as_posix()
        try:
            request.fingerprint = self.hasher.compute_fingerprint(request)
        except ReadError as e:
            logger.warning(str(e))
            self.read_errors += 1
            self.failed_paths.append(request.path)
            return None
        return request

    def run(self) -> None:
        """Thread target: drains the request queue."""
        for request in self.requests:
            reply = self.hash_request(request)
            if reply is not None:
                self.replies.put(reply)
                self.processed += 1


class HashWorkerPool:
    """
    Runs a fixed number of HashWorker threads and owns the closing of the reply queue.

    Usage:
        pool = HashWorkerPool(requests, replies, hasher, workers=4)
        pool.start()
        ...consume replies until closed...
        pool.join()
    """

    def __init__(self, requests: ClosableQueue, replies: ClosableQueue, hasher: Hasher, workers: int):
        if workers < 1:
            raise ValueError("Worker count must be >= 1")
        self.requests = requests
        self.replies = replies
        self.workers = [HashWorker(requests, replies, hasher) for _ in range(workers)]
        self.errors: List[BaseException] = []
        self._threads: List[threading.Thread] = []
        self._supervisor: Optional[threading.Thread] = None

    def start(self) -> None:
        """Spawns the workers and the supervisor that closes the reply queue."""
        if self._supervisor is not None:
            raise RuntimeError("Worker pool already started")

        self._threads = [
            threading.Thread(target=self._run_worker, args=(worker,),
                             name=f"hash-worker-{i}", daemon=True)
            for i, worker in enumerate(self.workers)
        ]
        for thread in self._threads:
            thread.start()

        self._supervisor = threading.Thread(target=self._supervise, name="hash-pool", daemon=True)
        self._supervisor.start()
        logger.debug(f"Started {len(self._threads)} hash workers")

    def join(self) -> None:
        """Waits until every worker has exited and the reply queue is closed."""
        if self._supervisor is not None:
            self._supervisor.join()

    def _run_worker(self, worker: HashWorker) -> None:
        try:
            worker.run()
        except Exception as e:
            # list.append is atomic; read only after join()
            logger.exception("Hash worker failed")
            self.errors.append(e)
            # Keep draining so the walker never blocks on a full request queue
            for _ in self.requests:
                pass

    def _supervise(self) -> None:
        try:
            for thread in self._threads:
                thread.join()
        finally:
            self.replies.close()
        logger.debug("All hash workers exited, reply queue closed")

    @property
    def read_errors(self) -> int:
        return sum(worker.read_errors for worker in self.workers)

    @property
    def failed_paths(self) -> List[str]:
        return [path for worker in self.workers for path in worker.failed_paths]

    @property
    def processed(self) -> int:
        return sum(worker.processed for worker in self.workers)
