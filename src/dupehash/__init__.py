"""
dupehash — concurrent duplicate file finder.

Core features:
- Size + full-content fingerprints (SHA-512 by default, optional MD5 in thorough mode)
- Walker, hashing worker pool and aggregator connected by bounded queues
- Collision groups built online; files without a match are discarded
- CLI interface for headless/server usage
"""

from importlib.metadata import version as _version, PackageNotFoundError

try:
    __version__ = _version("dupehash")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API — only what users should import directly
from dupehash.commands import DuplicateScanCommand
from dupehash.core import (
    ScanParams, ScanStats, FileHash, CollisionTable, HashAlgorithmName, HashPipeline)
from dupehash.utils.convert_utils import ConvertUtils

__all__ = [
    "DuplicateScanCommand",
    "ScanParams",
    "ScanStats",
    "FileHash",
    "CollisionTable",
    "HashAlgorithmName",
    "HashPipeline",
    "ConvertUtils",
    "__version__",
]
