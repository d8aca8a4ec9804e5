# tests/unit/test_pidfile.py
"""Tests for PID file bookkeeping."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from sigdaemon.errors import DaemonAlreadyRunning
from sigdaemon.pidfile import PidFile


@pytest.fixture
def pid_file(tmp_path: Path) -> PidFile:
    return PidFile(tmp_path / "state" / "sigdaemon.pid")


def test_write_records_current_pid(pid_file: PidFile):
    pid_file.write()

    assert pid_file.read() == os.getpid()
    assert pid_file.running_pid() == os.getpid()


def test_missing_file_reads_none(pid_file: PidFile):
    assert pid_file.read() is None
    assert pid_file.running_pid() is None


def test_garbage_content_reads_none(pid_file: PidFile):
    pid_file.path.parent.mkdir(parents=True)
    pid_file.path.write_text("not a pid\n")

    assert pid_file.read() is None


def test_stale_pid_is_ignored(pid_file: PidFile):
    pid_file.path.parent.mkdir(parents=True)
    pid_file.path.write_text("999999\n")

    with patch("sigdaemon.pidfile.psutil.pid_exists", return_value=False):
        assert pid_file.running_pid() is None
        pid_file.check()
        pid_file.write()

    assert pid_file.read() == os.getpid()


def test_live_owner_is_rejected(pid_file: PidFile):
    pid_file.path.parent.mkdir(parents=True)
    pid_file.path.write_text("999999\n")

    with patch("sigdaemon.pidfile.psutil.pid_exists", return_value=True):
        with pytest.raises(DaemonAlreadyRunning, match="999999"):
            pid_file.check()
        with pytest.raises(DaemonAlreadyRunning):
            pid_file.write()


def test_remove_only_own_pid(pid_file: PidFile):
    pid_file.path.parent.mkdir(parents=True)
    pid_file.path.write_text("999999\n")

    pid_file.remove()
    assert pid_file.path.exists()

    pid_file.path.write_text(f"{os.getpid()}\n")
    pid_file.remove()
    assert not pid_file.path.exists()
