"""
Signal bridging and daemon lifecycle.

Exports:
    - run_daemon: Lifecycle orchestrator entry point
    - current_state: Phase of the active lifecycle
    - detach_process: Terminal/session detach
    - DispatchThread: Channel-draining callback dispatcher
    - SignalChannel: Self-pipe between relay and dispatcher
"""

from sigdaemon.background.channel import SENTINEL, SignalChannel
from sigdaemon.background.detach import detach_process
from sigdaemon.background.dispatcher import DispatchThread
from sigdaemon.background.lifecycle import current_state, run_daemon
from sigdaemon.background.signals import (
    RELAYED_SIGNALS,
    attach_channel,
    detach_channel,
    install_relay,
    restore_handlers,
)

__all__ = [
    "run_daemon",
    "current_state",
    "detach_process",
    "DispatchThread",
    "SignalChannel",
    "SENTINEL",
    "RELAYED_SIGNALS",
    "attach_channel",
    "detach_channel",
    "install_relay",
    "restore_handlers",
]
