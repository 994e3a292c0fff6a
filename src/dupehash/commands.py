"""
Command orchestrator for duplicate scans.
This is the single entry point to the core engine used by the CLI.
"""
import os
from typing import Optional, Callable, Tuple
from dupehash.core.models import CollisionTable, ScanParams, ScanStats
from dupehash.core.pipeline import HashPipeline


class DuplicateScanCommand:
    """
    Orchestrates a scan:
    1. Check the root path before any thread is started
    2. Build the hasher from the params (primary + optional thorough digest)
    3. Run the walker → workers → aggregator pipeline

    Usage:
        params = ScanParams(root_dir="/home/user/Downloads", workers=4, thorough=True)
        collisions, stats = DuplicateScanCommand().execute(params)
    """

    def __init__(self):
        self._stats: Optional[ScanStats] = None

    def execute(
            self,
            params: ScanParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[CollisionTable, ScanStats]:
        """
        Execute a scan with given parameters.

        Args:
            params: Validated scan parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None

        Returns:
            Tuple of (collision table, statistics)

        Raises:
            RuntimeError: If the root path does not exist
        """
        if not os.path.exists(params.root_dir):
            raise RuntimeError(f"Directory does not exist: {params.root_dir}")

        collisions, stats = HashPipeline(params).run(progress_callback=progress_callback)
        self._stats = stats
        return collisions, stats

    def get_stats(self) -> Optional[ScanStats]:
        """Statistics of the last execution, if any."""
        return self._stats
