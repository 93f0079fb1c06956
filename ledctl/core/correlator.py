"""Single-flight command/reply correlation over one channel."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass

from ledctl.core.errors import CommandInFlightError, NotConnectedError
from ledctl.core.model import ReplyStatus, ResponseOutcome
from ledctl.transports.base import Channel

ACCEPTED_PREFIX = "ACCEPTED,"
REJECT_PREFIX = "REJECT,"
DEFAULT_REPLY_TIMEOUT_S = 2.0
_POLL_INTERVAL_S = 0.05
LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class AwaitingReply:
    command: str
    deadline: float


PendingState = Idle | AwaitingReply


def classify_reply(line: str) -> ReplyStatus | None:
    """Return the reply status for a protocol reply line, None for anything else."""
    if line.startswith(ACCEPTED_PREFIX):
        return ReplyStatus.ACCEPTED
    if line.startswith(REJECT_PREFIX):
        return ReplyStatus.REJECTED
    return None


class ResponseCorrelator:
    """Tracks the one in-flight command on a channel.

    The wire protocol carries no request ids, so at most one command may await
    a reply at a time; a concurrent `send_and_await` fails instead of waiting.
    """

    def __init__(self, channel: Channel, *, timeout_s: float = DEFAULT_REPLY_TIMEOUT_S) -> None:
        if timeout_s <= 0:
            raise ValueError("timeout_s must be positive")
        self.channel = channel
        self.timeout_s = timeout_s
        self._state: PendingState = Idle()
        self._lock = threading.Lock()

    @property
    def state(self) -> PendingState:
        return self._state

    def send_and_await(self, command: str) -> ResponseOutcome:
        if not self.channel.is_open:
            raise NotConnectedError("Serial port is not open. Call connect() first.")

        with self._lock:
            if isinstance(self._state, AwaitingReply):
                raise CommandInFlightError(
                    f"Command {self._state.command.strip()!r} is still awaiting a reply"
                )
            pending = AwaitingReply(command=command, deadline=time.monotonic() + self.timeout_s)
            self._state = pending

        try:
            # A late reply to an earlier, timed-out command must not resolve this one.
            self.channel.discard_input()
            self.channel.write(command)
            LOGGER.info("Sent command: %s", command.strip())
            return self._await_reply(pending)
        finally:
            with self._lock:
                self._state = Idle()

    def _await_reply(self, pending: AwaitingReply) -> ResponseOutcome:
        while True:
            remaining = pending.deadline - time.monotonic()
            if remaining <= 0:
                LOGGER.warning("No response received from device (timeout)")
                return ResponseOutcome(status=ReplyStatus.TIMED_OUT)

            line = self.channel.read_line(min(remaining, _POLL_INTERVAL_S))
            if line is None:
                continue
            status = classify_reply(line)
            if status is None:
                LOGGER.debug("Ignoring non-protocol line: %r", line)
                continue
            LOGGER.info("Device response: %s", line)
            return ResponseOutcome(status=status, payload=line)
