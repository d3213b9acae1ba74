"""Tests for journey.core.filelock."""

import os
import time

import pytest

from journey.core.filelock import FileLock


class TestFileLock:
    def test_context_creates_and_removes_sidecar(self, tmp_path):
        target = tmp_path / "journals.json"
        lock = FileLock(target)
        with lock:
            assert lock.locked
            assert (tmp_path / "journals.json.lock").exists()
        assert not lock.locked
        assert not (tmp_path / "journals.json.lock").exists()

    def test_second_lock_times_out(self, tmp_path):
        target = tmp_path / "journals.json"
        with FileLock(target):
            with pytest.raises(TimeoutError):
                FileLock(target, timeout=0.1, poll=0.01).acquire()

    def test_stale_lock_is_broken(self, tmp_path):
        target = tmp_path / "journals.json"
        sidecar = tmp_path / "journals.json.lock"
        sidecar.write_text("")
        old = time.time() - 60
        os.utime(sidecar, (old, old))
        with FileLock(target, timeout=0.1, poll=0.01) as lock:
            assert lock.locked

    def test_release_without_acquire_leaves_other_lock(self, tmp_path):
        target = tmp_path / "journals.json"
        with FileLock(target):
            FileLock(target).release()
            assert (tmp_path / "journals.json.lock").exists()
