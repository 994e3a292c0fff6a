"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/pipeline.py
Pipeline coordinator: Walker → request queue → Worker Pool → reply queue → Aggregator.

TERMINATION
-----------
  • The walker closes the request queue when traversal ends
  • Each worker exits when the request queue is closed and drained
  • The pool closes the reply queue after the last worker has exited
  • The aggregator, running on the calling thread, stops when the reply queue closes

Queue capacities bound memory: a full request queue stalls the walker and a
full reply queue stalls the workers until the aggregator catches up.
"""

import logging
import threading
import time
from typing import Callable, Optional, Tuple

from dupehash.core.aggregator import CollisionAggregator
from dupehash.core.channel import ClosableQueue
from dupehash.core.hasher import HasherImpl, get_algorithm
from dupehash.core.interfaces import Hasher
from dupehash.core.models import CollisionTable, FileHash, ScanParams, ScanStats
from dupehash.core.scanner import DirectoryWalker
from dupehash.core.workers import HashWorkerPool

logger = logging.getLogger(__name__)


def build_hasher(params: ScanParams) -> HasherImpl:
    """Creates the hasher described by the params (secondary digest in thorough mode)."""
    secondary = get_algorithm(params.secondary_algorithm) if params.thorough else None
    return HasherImpl(get_algorithm(params.algorithm), secondary)


class HashPipeline:
    """
    Runs one complete scan.

    Usage:
        pipeline = HashPipeline(ScanParams(root_dir="/home/user/Downloads", workers=4))
        collisions, stats = pipeline.run()
    """

    def __init__(self, params: ScanParams, hasher: Optional[Hasher] = None):
        self.params = params
        self.hasher = hasher or build_hasher(params)

    def run(
            self,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[CollisionTable, ScanStats]:
        """
        Walks, hashes and aggregates until every stage has finished.

        Returns:
            Tuple of (collision table, statistics)

        Raises:
            Exception: the first unexpected error raised inside the walker or a worker,
                       re-raised once all threads have stopped
            Exception: an error from progress_callback, re-raised after the
                       reply queue is drained and all threads have stopped
        """
        start_time = time.time()
        params = self.params

        requests: ClosableQueue[FileHash] = ClosableQueue(params.request_queue_size)
        replies: ClosableQueue[FileHash] = ClosableQueue(params.reply_queue_size)

        walker = DirectoryWalker(params.root_dir, params.min_size_bytes, requests)
        pool = HashWorkerPool(requests, replies, self.hasher, params.workers)
        aggregator = CollisionAggregator()

        logger.debug(
            f"Starting pipeline: root={params.root_dir}, workers={params.workers}, "
            f"hasher={self.hasher!r}"
        )

        walker_thread = threading.Thread(target=walker.run, name="dir-walker", daemon=True)
        walker_thread.start()
        pool.start()

        try:
            collisions = aggregator.consume(replies, progress_callback=progress_callback)
        except Exception:
            # Workers stay blocked on a full reply queue until it is drained
            for _ in replies:
                pass
            walker_thread.join()
            pool.join()
            raise

        walker_thread.join()
        pool.join()

        if walker.error is not None:
            raise walker.error
        if pool.errors:
            raise pool.errors[0]

        stats = ScanStats()
        stats.merge_walker(walker.stats)
        stats.read_errors = pool.read_errors
        aggregator.summarize(stats)
        stats.total_time = time.time() - start_time

        if stats.read_errors:
            logger.warning(f"Skipped {stats.read_errors} file(s) due to read errors")
        logger.debug(f"Pipeline finished in {stats.total_time:.2f} seconds")

        return collisions, stats
