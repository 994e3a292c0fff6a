"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Directory walker — the producing stage of the hashing pipeline.
Features:
- Pre-order traversal of the root directory (parents before children, names in order)
- Never reads symbolic links or special files; they count as undersized
- Emits one FileHash request per eligible file onto the request queue
- Closes the request queue when the traversal ends, whatever the outcome
- Returns the walker's ScanStats instead of updating shared counters
"""

import os
import time
import logging
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

# Local imports
from dupehash.core.models import FileHash, ScanStats
from dupehash.core.channel import ClosableQueue


class DirectoryWalker:
    """
    Walks a directory tree and feeds hash requests to the worker pool.

    Attributes:
        root_dir: Root directory (or single file) to scan
        min_size: Minimum file size in bytes; smaller files count as undersized
        requests: Request queue owned by this walker until it closes it
        stats: Walker counters, valid once walk() has returned
        error: Unexpected exception that ended the traversal, if any
    """

    def __init__(self, root_dir: str, min_size: int, requests: ClosableQueue):
        self.root_dir = root_dir
        self.min_size = max(0, min_size)
        self.requests = requests
        self.stats = ScanStats()
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        """Thread target: walks the tree and keeps any unexpected error for the coordinator."""
        try:
            self.walk()
        except Exception as e:
            logger.exception("Directory walk failed")
            self.error = e

    def walk(self) -> ScanStats:
        """
        Traverses the tree, enqueuing every eligible file.
        The request queue is closed on every exit path.
        """
        logger.debug(f"Walking directory: {self.root_dir} (min_size={self.min_size})")
        start_time = time.time()
        stats = self.stats

        try:
            for path, size in self._iter_files():
                stats.total_files += 1

                if size is None:
                    stats.skipped_files += 1
                    continue

                # Zero-length files never count as duplicates
                if size == 0 or size < self.min_size:
                    stats.undersized_files += 1
                    continue

                stats.hashing_files += 1
                self.requests.put(FileHash(path=path, size=size))
        finally:
            self.requests.close()

        logger.debug(f"Walk completed in {time.time() - start_time:.2f} seconds")
        logger.info(
            "Total Files: %d, Undersized: %d, Skipped: %d, Hashing: %d",
            stats.total_files, stats.undersized_files, stats.skipped_files, stats.hashing_files,
        )
        return stats

    def _iter_files(self) -> Iterator[tuple]:
        """
        Yields (path, size) for every non-directory entry in pre-order.
        size is None when the entry could not be inspected.
        """
        if os.path.isfile(self.root_dir):
            yield self.root_dir, self._stat_size(self.root_dir)
            return
        if not os.path.isdir(self.root_dir):
            logger.warning(f"Not a directory or regular file: {self.root_dir}")
            return

        yield from self._walk_dir(self.root_dir)

    def _walk_dir(self, directory: str) -> Iterator[tuple]:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.warning(f"Cannot list directory {directory}: {e}")
            return

        for entry in entries:
            try:
                is_link = entry.is_symlink()
                is_dir = not is_link and entry.is_dir(follow_symlinks=False)
                is_file = not is_link and entry.is_file(follow_symlinks=False)
            except OSError as e:
                logger.debug(f"Could not inspect {entry.path}: {e}")
                yield entry.path, None
                continue

            if is_dir:
                yield from self._walk_dir(entry.path)
                continue

            # Links are not followed; FIFOs, sockets and devices would block
            # or never end when read. Both still count, as undersized.
            if not is_file:
                logger.debug(f"Not reading link or special file: {entry.path}")
                yield entry.path, 0
                continue

            try:
                size = entry.stat(follow_symlinks=False).st_size
            except OSError as e:
                logger.debug(f"Could not get size of {entry.path}: {e}")
                size = None
            yield entry.path, size

    @staticmethod
    def _stat_size(path: str) -> Optional[int]:
        try:
            return os.stat(path).st_size
        except OSError as e:
            logger.debug(f"Could not get size of {path}: {e}")
            return None
