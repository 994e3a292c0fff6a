"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/aggregator.py
Single consumer of fingerprinted results. Buckets paths by fingerprint online,
keeping files without a match in a separate singles map so the collision
table never holds a bucket with fewer than two paths.
"""

import logging
from typing import Callable, Dict, Optional

from dupehash.core.channel import ClosableQueue
from dupehash.core.models import CollisionTable, FileHash, ScanStats

logger = logging.getLogger(__name__)

# Progress is reported every N results
PROGRESS_INTERVAL = 5000


class CollisionAggregator:
    """
    Incrementally builds the CollisionTable.
    Owned by a single thread; never shared with the workers.
    """

    def __init__(self):
        self._singles: Dict[str, str] = {}
        self._collisions: CollisionTable = {}
        self.received = 0

    def add(self, result: FileHash) -> None:
        """Places one result: extend a bucket, promote a single, or record a new single."""
        fingerprint = result.fingerprint
        self.received += 1

        bucket = self._collisions.get(fingerprint)
        if bucket is not None:
            bucket.append(result.path)
            return

        single = self._singles.pop(fingerprint, None)
        if single is not None:
            self._collisions[fingerprint] = [single, result.path]
            return

        self._singles[fingerprint] = result.path

    def consume(
            self,
            replies: ClosableQueue,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> CollisionTable:
        """
        Reads results until the reply queue is closed and drained.
        Returns the final collision table; singles are kept only for counting.
        """
        progress_counter = 0
        for result in replies:
            self.add(result)
            progress_counter += 1

            if progress_callback and progress_counter >= PROGRESS_INTERVAL:
                progress_callback('hashing', self.received, None)
                progress_counter = 0

        if progress_callback and progress_counter > 0:
            progress_callback('hashing', self.received, None)

        return self._collisions

    @property
    def collisions(self) -> CollisionTable:
        return self._collisions

    @property
    def singles_count(self) -> int:
        return len(self._singles)

    @property
    def colliding_files(self) -> int:
        return sum(len(paths) for paths in self._collisions.values())

    def summarize(self, stats: ScanStats) -> ScanStats:
        """Fills the collision counters of stats and discards the singles."""
        stats.singles = self.singles_count
        stats.collisions = len(self._collisions)
        stats.colliding_files = self.colliding_files
        stats.duplicates = stats.colliding_files - stats.collisions

        logger.info(
            "Misses: %d, Collisions: %d, Hashes: %d, Dupes: %d",
            stats.singles, stats.colliding_files, stats.collisions, stats.duplicates,
        )
        self._singles.clear()
        return stats
