# sigdaemon/background/lifecycle.py
"""
Daemon lifecycle orchestration.

Sequences detaching, signal channel + dispatch thread setup, relay
installation, the workload's start() and teardown, and reports the outcome.
"""

import errno
import logging
from typing import Any

from sigdaemon.background.channel import SignalChannel
from sigdaemon.background.detach import detach_process
from sigdaemon.background.dispatcher import DispatchThread
from sigdaemon.background.signals import (
    RELAYED_SIGNALS,
    attach_channel,
    detach_channel,
    install_relay,
    restore_handlers,
)
from sigdaemon.background.state import lifecycle_state
from sigdaemon.errors import SetupError
from sigdaemon.models.callbacks import DaemonCallbacks
from sigdaemon.models.lifecycle import DaemonResult, DetachResult, LifecycleState

logger = logging.getLogger(__name__)

# Reported when setup fails before start() could produce one
_SETUP_FAILURE_EXIT_CODE = 1


def current_state() -> LifecycleState:
    """Phase of the active (or most recent) run_daemon() invocation."""
    return lifecycle_state.phase


def run_daemon(callbacks: DaemonCallbacks, foreground: bool = False) -> DaemonResult:
    """
    Run a workload as a daemon.

    Steps:
        1. Claim the process-wide lifecycle state
        2. Detach from the terminal unless foreground (parent returns here)
        3. Open the signal channel and start the dispatch thread
        4. Relay SIGINT, SIGTERM and SIGHUP into the channel
        5. Enter RUNNING and let the dispatch thread fire callbacks
        6. Call callbacks.start(foreground) on this thread
        7. Close the callback window, then leave RUNNING
        8. Restore handlers, stop the dispatch thread, close the channel

    Everything created is torn down in reverse order before returning, on
    setup failure and when start() raises. Must be called from the main
    thread.

    Args:
        callbacks: Workload implementation
        foreground: Stay attached to the terminal

    Returns:
        DaemonResult with start()'s exit code, or the setup error

    Raises:
        LifecycleActiveError: If another run_daemon() call is active
    """
    lifecycle_state.claim(callbacks)
    try:
        return _run(callbacks, foreground)
    finally:
        lifecycle_state.release()


def _run(callbacks: DaemonCallbacks, foreground: bool) -> DaemonResult:
    if not foreground:
        lifecycle_state.transition(LifecycleState.DAEMONIZING)
        try:
            detached = detach_process()
        except SetupError as e:
            return _setup_failed(e)

        if detached is DetachResult.UNSUPPORTED:
            return _setup_failed(
                SetupError("detach unsupported on this platform", errno.ENOSYS)
            )
        if detached is DetachResult.PARENT:
            lifecycle_state.transition(LifecycleState.TERMINATED)
            return DaemonResult(success=True, exit_code=0)

    lifecycle_state.transition(LifecycleState.INSTALLING_SIGNALS)

    try:
        channel = SignalChannel.open()
    except SetupError as e:
        return _setup_failed(e)
    lifecycle_state.channel = channel

    dispatcher = DispatchThread(channel, callbacks)
    try:
        dispatcher.start()
    except SetupError as e:
        _close_channel(channel)
        return _setup_failed(e)

    try:
        binding = attach_channel(channel)
    except SetupError as e:
        dispatcher.stop()
        _close_channel(channel)
        return _setup_failed(e)

    previous: dict[int, Any] = {}
    try:
        for signum in RELAYED_SIGNALS:
            previous[signum] = install_relay(signum)
    except SetupError as e:
        restore_handlers(previous)
        detach_channel(binding)
        dispatcher.stop()
        _close_channel(channel)
        return _setup_failed(e)

    # Signals that arrived during installation are queued, not lost
    lifecycle_state.transition(LifecycleState.RUNNING)
    dispatcher.begin_dispatch()
    logger.info(f"Daemon running (foreground={foreground})")

    try:
        exit_code = callbacks.start(foreground)
    finally:
        dispatcher.end_dispatch()
        lifecycle_state.transition(LifecycleState.TEARING_DOWN)
        restore_handlers(previous)
        detach_channel(binding)
        dispatcher.stop()
        _close_channel(channel)
        lifecycle_state.transition(LifecycleState.TERMINATED)

    logger.info(f"Daemon stopped (exit_code={exit_code})")
    return DaemonResult(success=True, exit_code=exit_code)


def _close_channel(channel: SignalChannel) -> None:
    lifecycle_state.channel = None
    channel.close()


def _setup_failed(error: SetupError) -> DaemonResult:
    lifecycle_state.transition(LifecycleState.FAILED_SETUP)
    logger.error(f"Daemon setup failed: {error}")
    return DaemonResult(success=False, exit_code=_SETUP_FAILURE_EXIT_CODE, error=error)
