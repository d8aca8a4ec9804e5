# tests/unit/test_errors.py
"""Tests for error types and the abort helper."""

import errno
import logging
import os
from unittest.mock import patch

from sigdaemon.errors import SetupError, fatal


class TestSetupError:
    def test_message_includes_code_and_strerror(self):
        error = SetupError("pipe() failed", errno.EMFILE)

        assert error.code == errno.EMFILE
        assert error.reason == "pipe() failed"
        assert str(error).startswith(f"pipe() failed ({errno.EMFILE}): ")

    def test_from_os_error_keeps_errno(self):
        exc = OSError(errno.EAGAIN, "Resource temporarily unavailable")

        error = SetupError.from_os_error("fork() failed", exc)

        assert error.code == errno.EAGAIN
        assert "fork() failed" in str(error)


def test_fatal_logs_and_aborts(caplog):
    """fatal() logs at CRITICAL then aborts the process."""
    with patch("sigdaemon.errors.os.abort") as mock_abort:
        with caplog.at_level(logging.CRITICAL, logger="sigdaemon.errors"):
            fatal("broken invariant")

    mock_abort.assert_called_once_with()
    assert "broken invariant" in caplog.text


def test_from_os_error_without_errno_falls_back_to_eio():
    error = SetupError.from_os_error("pipe() failed", OSError("no errno attached"))

    assert error.code == errno.EIO
    assert str(error) == f"pipe() failed ({errno.EIO}): {os.strerror(errno.EIO)}"
