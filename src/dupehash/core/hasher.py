"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file hashing using pluggable streaming hash algorithms.

The HasherImpl class streams a file through a primary algorithm (and a
secondary one in thorough mode) and builds the composite fingerprint
    <size zero-padded to 16 digits>.<primary hex>[.<secondary hex>]
"""

import hashlib
import logging
from typing import Dict, Optional

import xxhash

from dupehash.core.models import FileHash, HashAlgorithmName, FINGERPRINT_SIZE_WIDTH
from dupehash.core.interfaces import Hasher, HashAlgorithm, StreamingHash

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024 * 1024


class ReadError(RuntimeError):
    """A file could not be opened or read completely."""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Error reading {path}: {cause}")
        self.path = path
        self.cause = cause


# Use the same way to implement and use any other hashing algorithm
class Sha512AlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.SHA512.value

    @staticmethod
    def new() -> StreamingHash:
        return hashlib.sha512()


class Sha256AlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.SHA256.value

    @staticmethod
    def new() -> StreamingHash:
        return hashlib.sha256()


class Blake2bAlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.BLAKE2B.value

    @staticmethod
    def new() -> StreamingHash:
        return hashlib.blake2b()


class Md5AlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.MD5.value

    @staticmethod
    def new() -> StreamingHash:
        return hashlib.md5()


class XXHashAlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.XXH64.value

    @staticmethod
    def new() -> StreamingHash:
        return xxhash.xxh64()


class XXH128AlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.XXH128.value

    @staticmethod
    def new() -> StreamingHash:
        return xxhash.xxh128()


ALGORITHMS: Dict[HashAlgorithmName, HashAlgorithm] = {
    HashAlgorithmName.SHA512: Sha512AlgorithmImpl(),
    HashAlgorithmName.SHA256: Sha256AlgorithmImpl(),
    HashAlgorithmName.BLAKE2B: Blake2bAlgorithmImpl(),
    HashAlgorithmName.MD5: Md5AlgorithmImpl(),
    HashAlgorithmName.XXH64: XXHashAlgorithmImpl(),
    HashAlgorithmName.XXH128: XXH128AlgorithmImpl(),
}


def get_algorithm(name: HashAlgorithmName) -> HashAlgorithm:
    """Resolves an algorithm name to its implementation."""
    try:
        return ALGORITHMS[name]
    except KeyError:
        raise ValueError(f"Unsupported hash algorithm: {name!r}")


def hash_file(path: str, algorithm: HashAlgorithm, chunk_size: int = READ_CHUNK_SIZE) -> str:
    """
    Streams the whole file through the algorithm and returns the lowercase hex digest.

    Args:
        path: Path to the file
        algorithm: Algorithm providing a fresh streaming hash object
        chunk_size: Number of bytes fed to the hash per read

    Returns:
        str: hex digest of the full file content

    Raises:
        ReadError: If the file cannot be opened or a read fails partway
    """
    hasher = algorithm.new()
    try:
        with open(path, 'rb') as f:
            for chunk in iter(lambda: f.read(chunk_size), b''):
                hasher.update(chunk)
    except OSError as e:
        raise ReadError(path, e) from e
    return hasher.hexdigest()


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    A secondary algorithm, when given, is appended to the fingerprint (thorough mode).
    """

    def __init__(self, algorithm: HashAlgorithm, secondary: Optional[HashAlgorithm] = None,
                 chunk_size: int = READ_CHUNK_SIZE):
        self.algorithm = algorithm
        self.secondary = secondary
        self.chunk_size = chunk_size

    @property
    def thorough(self) -> bool:
        return self.secondary is not None

    def compute_fingerprint(self, file: FileHash) -> str:
        """
        Computes the size-prefixed fingerprint of a file.
        Raises ReadError if either pass over the file fails.
        """
        digest = hash_file(file.path, self.algorithm, self.chunk_size)

        if self.secondary is not None:
            # Second pass for the thorough-mode digest
            digest += "." + hash_file(file.path, self.secondary, self.chunk_size)

        return f"{file.size:0{FINGERPRINT_SIZE_WIDTH}d}.{digest}"

    def __repr__(self):
        secondary = f"+{self.secondary.name}" if self.secondary else ""
        return f"<HasherImpl {self.algorithm.name}{secondary}>"
