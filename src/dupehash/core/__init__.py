"""
Core hashing pipeline — walker, digest engine, worker pool, aggregator and coordinator.

This package contains the concurrent foundation of dupehash:
- DirectoryWalker: pre-order traversal producing hash requests
- HasherImpl + algorithm implementations: streaming SHA-512/MD5/xxHash fingerprints
- HashWorkerPool: fixed-size pool of hashing threads
- CollisionAggregator: online bucketing of results into collision groups
- HashPipeline: queue lifecycle and the termination protocol
- Models: FileHash, ScanStats, ScanParams and the CollisionTable alias

All components are pure Python with no UI dependencies.
"""

from .channel import ClosableQueue, QueueClosed
from .scanner import DirectoryWalker
from .hasher import (
    HasherImpl, ReadError, hash_file, get_algorithm,
    Sha512AlgorithmImpl, Sha256AlgorithmImpl, Blake2bAlgorithmImpl, Md5AlgorithmImpl,
    XXHashAlgorithmImpl, XXH128AlgorithmImpl)
from .workers import HashWorker, HashWorkerPool
from .aggregator import CollisionAggregator
from .pipeline import HashPipeline, build_hasher
from .models import (
    FileHash, ScanStats, ScanParams, CollisionTable, HashAlgorithmName,
    FINGERPRINT_SIZE_WIDTH)

__all__ = [
    "ClosableQueue",
    "QueueClosed",
    "DirectoryWalker",
    "HasherImpl",
    "ReadError",
    "hash_file",
    "get_algorithm",
    "Sha512AlgorithmImpl",
    "Sha256AlgorithmImpl",
    "Blake2bAlgorithmImpl",
    "Md5AlgorithmImpl",
    "XXHashAlgorithmImpl",
    "XXH128AlgorithmImpl",
    "HashWorker",
    "HashWorkerPool",
    "CollisionAggregator",
    "HashPipeline",
    "build_hasher",
    "FileHash",
    "ScanStats",
    "ScanParams",
    "CollisionTable",
    "HashAlgorithmName",
    "FINGERPRINT_SIZE_WIDTH",
]
