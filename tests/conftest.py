"""
Shared fixtures for pipeline tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so 'dupehash' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture
def test_files(tmp_path) -> Dict[str, Path]:
    """
    Creates controlled test files for duplicate detection scenarios:
    - 2 identical 1KB files + 1 more copy in a subdirectory (group of 3)
    - 2 identical 2KB files (group of 2)
    - 2 unique files (one differs from the 1KB group by a single byte)
    - 2 identical 10-byte files (undersized with the default 256B threshold)
    - 1 empty file (always undersized)
    """
    files = {}

    # Duplicate group #1 (1KB of 'A')
    content_a = b"A" * 1024
    files["dup1_a"] = tmp_path / "dup1_a.txt"
    files["dup1_b"] = tmp_path / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    # Duplicate group #2 (2KB of 'B')
    content_b = b"B" * 2048
    files["dup2_a"] = tmp_path / "dup2_a.bin"
    files["dup2_b"] = tmp_path / "dup2_b.bin"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    # Unique files; near_a has the same size as group #1 and one differing byte
    files["unique"] = tmp_path / "unique.txt"
    files["unique"].write_bytes(b"C" * 1500)
    files["near_a"] = tmp_path / "near_a.txt"
    files["near_a"].write_bytes(b"A" * 1023 + b"Z")

    # Tiny identical files (below the default threshold)
    files["tiny_a"] = tmp_path / "tiny_a.txt"
    files["tiny_b"] = tmp_path / "tiny_b.txt"
    files["tiny_a"].write_bytes(b"0123456789")
    files["tiny_b"].write_bytes(b"0123456789")

    # Empty file
    files["empty"] = tmp_path / "empty.txt"
    files["empty"].write_bytes(b"")

    # Subdirectory with another copy of group #1
    subdir = tmp_path / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)

    return files


def as_posix(path: Path) -> str:
    """Path string in the form produced by the hash workers."""
    return Path(path).as_posix()


def bucket_sets(collisions) -> set:
    """Collision table as a set of frozensets, ignoring order inside buckets."""
    return {frozenset(paths) for paths in collisions.values()}
