"""Stable public API for building tooling on top of ledctl.

This module is the supported integration surface for third-party callers
(MCP servers, GUIs, scripts). Avoid importing from internal modules unless
intentionally depending on non-stable internals.
"""

from __future__ import annotations

from ledctl.core.boards import BoardCatalog
from ledctl.core.colors import hex_to_rgb_spec
from ledctl.core.config import Settings
from ledctl.core.errors import (
    BoardLoadError,
    BoardSelectionError,
    BoardValidationError,
    CommandInFlightError,
    ConfigError,
    InvalidBrightnessError,
    InvalidColorError,
    InvalidCombinationError,
    InvalidIntervalError,
    LedctlError,
    NoActionSpecifiedError,
    NotConnectedError,
    PortResolutionError,
    RegistryError,
    RequestValidationError,
    SerialConnectError,
    SerialReadError,
    SerialWriteError,
    TransportError,
)
from ledctl.core.model import (
    ActionRequest,
    Board,
    ControlResult,
    LedMapping,
    LedStatus,
    ProtocolVariant,
    ReplyStatus,
    ResponseOutcome,
    RgbColor,
)
from ledctl.core.registry import LedRegistry
from ledctl.core.session import ChannelFactory, LedSession

__all__ = [
    "LedctlError",
    "RequestValidationError",
    "InvalidColorError",
    "InvalidIntervalError",
    "InvalidBrightnessError",
    "NoActionSpecifiedError",
    "InvalidCombinationError",
    "BoardLoadError",
    "BoardValidationError",
    "BoardSelectionError",
    "ConfigError",
    "PortResolutionError",
    "RegistryError",
    "TransportError",
    "NotConnectedError",
    "CommandInFlightError",
    "SerialConnectError",
    "SerialWriteError",
    "SerialReadError",
    "ActionRequest",
    "Board",
    "ControlResult",
    "LedMapping",
    "LedStatus",
    "ProtocolVariant",
    "ReplyStatus",
    "ResponseOutcome",
    "RgbColor",
    "Client",
]


class Client:
    """Public client for controlling board LEDs.

    A `Client` wraps board selection, serial port resolution, and the
    one-command-per-connection LED session behind a stable API. Numbered LEDs
    configured via ``LED_<n>_PORT``/``LED_<n>_NAME`` can be addressed with
    ``led=<n>`` instead of an explicit port.
    """

    def __init__(
        self,
        *,
        board_id: str | None = None,
        settings: Settings | None = None,
        channel_factory: ChannelFactory | None = None,
        catalog: BoardCatalog | None = None,
        registry: LedRegistry | None = None,
    ) -> None:
        self._settings = settings or Settings.from_env()
        self._catalog = catalog or BoardCatalog()
        self._board = self._catalog.get(board_id or self._settings.board)
        self._channel_factory = channel_factory
        if registry is None:
            registry = LedRegistry()
            registry.load_from_env()
        self._registry = registry

    @property
    def board(self) -> Board:
        return self._board

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._catalog.load_warnings + self._registry.load_warnings

    def list_boards(self) -> list[Board]:
        return self._catalog.available()

    def list_leds(self) -> list[LedMapping]:
        return self._registry.all()

    def led_status(self, number: int) -> LedStatus:
        return self._registry.status(number)

    def resolve_port(self, port: str | None = None, *, led: int | None = None) -> str:
        if led is not None:
            if port is not None:
                raise ConfigError("Specify either port or led, not both")
            return self._registry.port_for(led)
        return self._settings.resolve_serial_port(port)

    def control_led(
        self,
        action: str,
        *,
        port: str | None = None,
        led: int | None = None,
        color: str | None = None,
        second_color: str | None = None,
        interval: int | None = None,
        brightness: int | None = None,
    ) -> ControlResult:
        """Run one named action. Colors may be palette names, ``r,g,b`` or ``#RRGGBB``."""
        request = ActionRequest.from_action(
            action,
            color=hex_to_rgb_spec(color),
            second_color=hex_to_rgb_spec(second_color),
            interval=interval,
            brightness=brightness,
        )
        return self.execute(request, port=port, led=led)

    def execute(
        self,
        request: ActionRequest,
        *,
        port: str | None = None,
        led: int | None = None,
    ) -> ControlResult:
        resolved_port = self.resolve_port(port, led=led)
        session = LedSession(
            resolved_port,
            baud_rate=self._board.baud_rate,
            variant=self._board.variant,
            timeout_s=self._settings.reply_timeout_s,
            channel_factory=self._channel_factory,
        )
        result = session.control_led(request)
        if led is not None:
            self._registry.record(led, result)
        return result
