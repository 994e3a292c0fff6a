"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for the hashing pipeline: hash requests/results, scan statistics
and scan parameters.
"""

from dataclasses import dataclass
from typing import List, Dict
from enum import Enum

from dupehash.utils.convert_utils import ConvertUtils

# Width of the zero-padded size prefix inside a fingerprint
FINGERPRINT_SIZE_WIDTH = 16

DEFAULT_MIN_SIZE_BYTES = 256
DEFAULT_WORKERS = 9
DEFAULT_REQUEST_QUEUE_SIZE = 65536
DEFAULT_REPLY_QUEUE_FACTOR = 2

# Fingerprint -> paths sharing it (insertion order), every bucket has 2+ paths
CollisionTable = Dict[str, List[str]]


# =============================
# Enums
# =============================

class HashAlgorithmName(Enum):
    """Digest algorithms available to the Digest Engine."""
    SHA512 = "sha512"
    SHA256 = "sha256"
    BLAKE2B = "blake2b"
    MD5 = "md5"
    XXH64 = "xxh64"
    XXH128 = "xxh128"

    @property
    def display_name(self) -> str:
        """Human-readable name for summaries."""
        mapping = {
            HashAlgorithmName.SHA512: "SHA-512",
            HashAlgorithmName.SHA256: "SHA-256",
            HashAlgorithmName.BLAKE2B: "BLAKE2b",
            HashAlgorithmName.MD5: "MD5",
            HashAlgorithmName.XXH64: "xxHash64",
            HashAlgorithmName.XXH128: "xxHash128",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


# ======================
#  Core Data Models
# ======================

@dataclass
class FileHash:
    """
    A request for, and later the result of, hashing one file.
    The walker creates it with an empty fingerprint; exactly one worker fills
    the fingerprint before handing the record on to the aggregator.
    """
    path: str
    size: int  # in bytes
    fingerprint: str = ""

    @property
    def is_hashed(self) -> bool:
        return bool(self.fingerprint)

    def __repr__(self):
        return f"<FileHash path={self.path}, size={self.size}>"


@dataclass
class ScanStats:
    """
    Statistics collected during one scan.

    Walker counters (total/undersized/skipped/hashing) are final once the walker
    returns, read_errors once every worker has exited, and the collision
    counters once the reply stream is exhausted.
    """
    total_files: int = 0
    undersized_files: int = 0
    skipped_files: int = 0
    hashing_files: int = 0
    read_errors: int = 0
    singles: int = 0
    collisions: int = 0
    colliding_files: int = 0
    duplicates: int = 0
    total_time: float = 0.0

    def merge_walker(self, other: "ScanStats") -> None:
        """Copies the walker-owned counters from another stats record."""
        self.total_files = other.total_files
        self.undersized_files = other.undersized_files
        self.skipped_files = other.skipped_files
        self.hashing_files = other.hashing_files

    @property
    def hashed_files(self) -> int:
        """Files that were enqueued and produced a fingerprint."""
        return self.hashing_files - self.read_errors

    def print_summary(self) -> str:
        lines = [
            "📊 Scan Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            f"Total Files: {self.total_files}",
            f"Undersized: {self.undersized_files}",
            f"Skipped (access errors): {self.skipped_files}",
            f"Hashing: {self.hashing_files}",
        ]
        if self.read_errors:
            lines.append(f"Read Errors: {self.read_errors}")
        lines.extend([
            f"Misses: {self.singles}",
            f"Collisions: {self.colliding_files}",
            f"Hashes: {self.collisions}",
            f"Dupes: {self.duplicates}",
        ])
        return "\n".join(lines)


"""
DTO for scan parameters with built-in validation.
"""
from dataclasses import field


@dataclass
class ScanParams:
    """Parameters for a scan with validation."""
    root_dir: str = "."
    min_size_bytes: int = DEFAULT_MIN_SIZE_BYTES
    workers: int = DEFAULT_WORKERS
    thorough: bool = False
    list_collisions: bool = False
    algorithm: HashAlgorithmName = HashAlgorithmName.SHA512
    secondary_algorithm: HashAlgorithmName = field(default=HashAlgorithmName.MD5)
    request_queue_size: int = DEFAULT_REQUEST_QUEUE_SIZE
    reply_queue_factor: int = DEFAULT_REPLY_QUEUE_FACTOR

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        if self.workers < 1:
            raise ValueError("Worker count must be >= 1")

        # Negative thresholds mean "no threshold"
        if self.min_size_bytes < 0:
            self.min_size_bytes = 0

        if self.thorough and self.secondary_algorithm == self.algorithm:
            raise ValueError("Secondary digest must differ from the primary digest")

        if self.request_queue_size < 1:
            raise ValueError("Request queue size must be >= 1")

        if self.reply_queue_factor < 1:
            raise ValueError("Reply queue factor must be >= 1")

    @property
    def reply_queue_size(self) -> int:
        return self.workers * self.reply_queue_factor

    @staticmethod
    def from_human_readable(
            root_dir: str,
            min_size_str: str,
            workers: int = DEFAULT_WORKERS,
            thorough: bool = False,
            list_collisions: bool = False,
            algorithm: HashAlgorithmName = HashAlgorithmName.SHA512,
    ) -> 'ScanParams':
        """
        Factory method to create params from human-readable inputs.
        A leading minus sign clamps the threshold to zero.
        """
        min_size_str = min_size_str.strip()
        if min_size_str.startswith("-"):
            min_size = 0
        else:
            min_size = ConvertUtils.human_to_bytes(min_size_str)

        return ScanParams(
            root_dir=root_dir,
            min_size_bytes=min_size,
            workers=workers,
            thorough=thorough,
            list_collisions=list_collisions,
            algorithm=algorithm,
        )
