"""
Unit tests for DirectoryWalker.
Verifies request emission, size filtering, counters, and request-queue closing.
"""
import os
import sys
import pytest
from pathlib import Path
from unittest import mock
from dupehash.core.channel import ClosableQueue
from dupehash.core.scanner import DirectoryWalker


def walk(root, min_size=256, capacity=1024):
    """Runs a walker to completion and returns (requests, stats)."""
    queue = ClosableQueue(capacity)
    walker = DirectoryWalker(str(root), min_size, queue)
    stats = walker.walk()
    return list(queue), stats


class TestDirectoryWalker:
    """Test traversal, filtering and counters."""

    def test_emits_requests_for_eligible_files(self, test_files, tmp_path):
        requests, stats = walk(tmp_path)

        paths = {r.path for r in requests}
        expected = {str(test_files[k]) for k in
                    ("dup1_a", "dup1_b", "dup2_a", "dup2_b", "unique", "near_a", "sub_dup")}
        assert paths == expected
        assert all(r.fingerprint == "" for r in requests)
        assert all(r.size == os.path.getsize(r.path) for r in requests)

    def test_counters(self, test_files, tmp_path):
        _, stats = walk(tmp_path)
        assert stats.total_files == 10
        assert stats.undersized_files == 3  # tiny_a, tiny_b, empty
        assert stats.hashing_files == 7
        assert stats.skipped_files == 0

    def test_counter_invariant_holds(self, test_files, tmp_path):
        _, stats = walk(tmp_path, min_size=1500)
        assert stats.total_files == stats.undersized_files + stats.hashing_files + stats.skipped_files

    def test_min_size_threshold_is_inclusive(self, tmp_path):
        """Files exactly at the threshold are hashed; one byte less is undersized."""
        (tmp_path / "exact.bin").write_bytes(b"x" * 256)
        (tmp_path / "short.bin").write_bytes(b"x" * 255)
        requests, stats = walk(tmp_path, min_size=256)
        assert [Path(r.path).name for r in requests] == ["exact.bin"]
        assert stats.undersized_files == 1

    def test_zero_byte_files_undersized_even_without_threshold(self, tmp_path):
        (tmp_path / "empty.bin").write_bytes(b"")
        (tmp_path / "one.bin").write_bytes(b"1")
        requests, stats = walk(tmp_path, min_size=0)
        assert [Path(r.path).name for r in requests] == ["one.bin"]
        assert stats.undersized_files == 1

    def test_negative_min_size_treated_as_zero(self, tmp_path):
        (tmp_path / "one.bin").write_bytes(b"1")
        requests, _ = walk(tmp_path, min_size=-10)
        assert len(requests) == 1

    def test_directories_are_not_counted(self, tmp_path):
        (tmp_path / "a" / "b" / "c").mkdir(parents=True)
        requests, stats = walk(tmp_path)
        assert requests == []
        assert stats.total_files == 0

    def test_pre_order_traversal(self, tmp_path):
        """Entries are visited in name order with each directory expanded in place."""
        (tmp_path / "b").mkdir()
        for rel in ("a.bin", "b/inner.bin", "c.bin"):
            (tmp_path / rel).write_bytes(b"x" * 300)
        requests, _ = walk(tmp_path)
        assert [Path(r.path).relative_to(tmp_path).as_posix() for r in requests] == \
            ["a.bin", "b/inner.bin", "c.bin"]

    def test_empty_tree_closes_queue(self, tmp_path):
        requests, stats = walk(tmp_path)
        assert requests == []
        assert stats.total_files == 0

    def test_root_may_be_a_single_file(self, tmp_path):
        target = tmp_path / "only.bin"
        target.write_bytes(b"x" * 300)
        requests, stats = walk(target)
        assert [r.path for r in requests] == [str(target)]
        assert stats.total_files == 1

    def test_missing_root_yields_nothing(self, tmp_path):
        requests, stats = walk(tmp_path / "does-not-exist")
        assert requests == []
        assert stats.total_files == 0

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlinks_are_not_followed(self, tmp_path):
        real = tmp_path / "real.bin"
        real.write_bytes(b"x" * 300)
        (tmp_path / "link.bin").symlink_to(real)
        (tmp_path / "broken.bin").symlink_to(tmp_path / "nowhere")
        requests, stats = walk(tmp_path, min_size=0)
        assert [Path(r.path).name for r in requests] == ["real.bin"]
        # Links are counted but never read, even without a size threshold
        assert stats.total_files == 3
        assert stats.undersized_files == 2
        assert stats.hashing_files == 1

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="FIFOs need a POSIX platform")
    def test_special_files_counted_but_not_read(self, tmp_path):
        (tmp_path / "real.bin").write_bytes(b"x" * 300)
        (tmp_path / "link.bin").symlink_to(tmp_path / "real.bin")
        os.mkfifo(tmp_path / "pipe")

        requests, stats = walk(tmp_path)

        assert [Path(r.path).name for r in requests] == ["real.bin"]
        assert stats.total_files == 3
        assert stats.undersized_files == 2
        assert stats.total_files == stats.undersized_files + stats.hashing_files + stats.skipped_files

    def test_stat_failure_counts_as_skipped(self, tmp_path):
        """An entry that vanishes between listing and stat is counted and skipped."""
        (tmp_path / "ok.bin").write_bytes(b"x" * 300)
        (tmp_path / "vanishing.bin").write_bytes(b"x" * 300)

        real_scandir = os.scandir

        class VanishingEntry:
            def __init__(self, entry):
                self._entry = entry
                self.name = entry.name
                self.path = entry.path

            def is_symlink(self):
                return self._entry.is_symlink()

            def is_dir(self, follow_symlinks=True):
                return self._entry.is_dir(follow_symlinks=follow_symlinks)

            def is_file(self, follow_symlinks=True):
                return self._entry.is_file(follow_symlinks=follow_symlinks)

            def stat(self, follow_symlinks=True):
                if self.name == "vanishing.bin":
                    raise FileNotFoundError(self.path)
                return self._entry.stat(follow_symlinks=follow_symlinks)

        class WrappedScandir:
            def __init__(self, path):
                self._it = real_scandir(path)

            def __enter__(self):
                return (VanishingEntry(e) for e in self._it)

            def __exit__(self, *exc):
                self._it.close()
                return False

        with mock.patch("dupehash.core.scanner.os.scandir", WrappedScandir):
            requests, stats = walk(tmp_path)

        assert [Path(r.path).name for r in requests] == ["ok.bin"]
        assert stats.total_files == 2
        assert stats.skipped_files == 1
        assert stats.total_files == stats.undersized_files + stats.hashing_files + stats.skipped_files

    def test_unlistable_directory_is_skipped(self, tmp_path):
        (tmp_path / "ok.bin").write_bytes(b"x" * 300)
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "hidden.bin").write_bytes(b"x" * 300)

        real_scandir = os.scandir

        def scandir(path):
            if Path(path) == locked:
                raise PermissionError(path)
            return real_scandir(path)

        with mock.patch("dupehash.core.scanner.os.scandir", side_effect=scandir):
            requests, stats = walk(tmp_path)

        assert [Path(r.path).name for r in requests] == ["ok.bin"]
        assert stats.total_files == 1


class TestWalkerQueueOwnership:
    """The walker must close the request queue on every exit path."""

    def test_queue_closed_after_walk(self, test_files, tmp_path):
        queue = ClosableQueue(1024)
        DirectoryWalker(str(tmp_path), 256, queue).walk()
        assert queue.closed

    def test_queue_closed_when_walk_fails(self, tmp_path):
        (tmp_path / "a.bin").write_bytes(b"x" * 300)
        queue = ClosableQueue(16)
        walker = DirectoryWalker(str(tmp_path), 256, queue)

        with mock.patch.object(walker, "_iter_files", side_effect=RuntimeError("boom")):
            walker.run()

        assert queue.closed
        assert isinstance(walker.error, RuntimeError)

    def test_run_keeps_stats(self, test_files, tmp_path):
        queue = ClosableQueue(1024)
        walker = DirectoryWalker(str(tmp_path), 256, queue)
        walker.run()
        assert walker.error is None
        assert walker.stats.hashing_files == 7
