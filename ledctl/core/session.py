"""LED session orchestration used by CLI and API frontends."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ledctl.core.actions import resolve_action
from ledctl.core.correlator import DEFAULT_REPLY_TIMEOUT_S, ResponseCorrelator
from ledctl.core.encoder import encode
from ledctl.core.model import (
    ActionRequest,
    ControlResult,
    ProtocolVariant,
    ReplyStatus,
)
from ledctl.transports.base import Channel
from ledctl.transports.serial_port import DEFAULT_BAUD_RATE, SerialChannel

LOGGER = logging.getLogger(__name__)

ChannelFactory = Callable[[str, int], Channel]


class LedSession:
    def __init__(
        self,
        port: str,
        *,
        baud_rate: int = DEFAULT_BAUD_RATE,
        variant: ProtocolVariant = ProtocolVariant.FULL_COLOR,
        timeout_s: float = DEFAULT_REPLY_TIMEOUT_S,
        channel_factory: ChannelFactory | None = None,
    ) -> None:
        self.port = port
        self.baud_rate = baud_rate
        self.variant = variant
        self.timeout_s = timeout_s
        self.channel_factory = channel_factory or SerialChannel

    def control_led(self, request: ActionRequest) -> ControlResult:
        channel = self.channel_factory(self.port, self.baud_rate)
        channel.connect()
        try:
            action = resolve_action(request)
            command = encode(action, self.variant)
            for warning in command.warnings:
                LOGGER.warning(warning)

            correlator = ResponseCorrelator(channel, timeout_s=self.timeout_s)
            outcome = correlator.send_and_await(command.wire)
        finally:
            channel.disconnect()

        if outcome.status is ReplyStatus.ACCEPTED:
            LOGGER.info("%s accepted by %s", action.name, self.port)
        elif outcome.status is ReplyStatus.REJECTED:
            LOGGER.warning("%s rejected by %s: %s", action.name, self.port, outcome.payload)

        return ControlResult(port=self.port, action=action, command=command, outcome=outcome)
