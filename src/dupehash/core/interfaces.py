"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the hashing pipeline.

Key Components:
---------------
- StreamingHash: incremental hash object (update + hexdigest), as returned by
  hashlib and xxhash constructors.
- HashAlgorithm: factory for streaming hash objects (e.g., SHA-512, MD5, xxHash).
- Hasher: computes the composite fingerprint of a file.
"""

from typing import Protocol
from dupehash.core.models import FileHash


# ===== Interfaces =====

class StreamingHash(Protocol):
    """Incremental hash state fed with consecutive chunks of a file."""
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like SHA-512, MD5, or xxHash
    without affecting the rest of the pipeline.
    """
    name: str

    @staticmethod
    def new() -> StreamingHash:
        """Returns a fresh streaming hash object."""
        ...


class Hasher(Protocol):
    """Interface for fingerprinting a file's size and content."""
    def compute_fingerprint(self, file: FileHash) -> str: ...
