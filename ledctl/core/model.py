"""Core data models used across resolver, encoder, session, and CLI."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from ledctl.core.errors import NoActionSpecifiedError


@dataclass(frozen=True)
class RgbColor:
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for component in (self.r, self.g, self.b):
            if not 0 <= component <= 255:
                raise ValueError(f"RGB component out of range 0-255: {component}")

    def __str__(self) -> str:
        return f"{self.r},{self.g},{self.b}"


class ProtocolVariant(Enum):
    FULL_COLOR = "WS2812"
    BINARY_ONLY = "Digital"

    @classmethod
    def from_protocol(cls, protocol: str | None) -> ProtocolVariant:
        """Map a board's `led.protocol` value; anything unknown is treated as on/off only."""
        for variant in cls:
            if protocol and variant.value.lower() == protocol.lower():
                return variant
        return cls.BINARY_ONLY


@dataclass(frozen=True)
class ActionRequest:
    """Flags supplied by a caller in one invocation.

    `blink` is either a bool or a color spec string (``--blink red``).
    """

    on: bool = False
    off: bool = False
    color: str | None = None
    blink: bool | str = False
    second_color: str | None = None
    rainbow: bool = False
    interval: int | None = None
    brightness: int | None = None

    ACTIONS: ClassVar[tuple[str, ...]] = ("on", "off", "color", "blink", "rainbow")

    @classmethod
    def from_action(
        cls,
        action: str,
        *,
        color: str | None = None,
        second_color: str | None = None,
        interval: int | None = None,
        brightness: int | None = None,
    ) -> ActionRequest:
        """Build a request from a single named action plus its options."""
        normalized = (action or "").strip().lower()
        if normalized not in cls.ACTIONS:
            allowed = ", ".join(cls.ACTIONS)
            raise NoActionSpecifiedError(f"Invalid action: '{action}'. Allowed: {allowed}")
        if normalized == "on" and color:
            # "on" with a color means solid color, not white.
            normalized = "color"
        return cls(
            on=normalized == "on",
            off=normalized == "off",
            color=color,
            blink=normalized == "blink",
            second_color=second_color,
            rainbow=normalized == "rainbow",
            interval=interval,
            brightness=brightness,
        )


@dataclass(frozen=True)
class TurnOn:
    request: ActionRequest = field(default_factory=ActionRequest, compare=False)
    name: ClassVar[str] = "on"


@dataclass(frozen=True)
class TurnOff:
    request: ActionRequest = field(default_factory=ActionRequest, compare=False)
    name: ClassVar[str] = "off"


@dataclass(frozen=True)
class SetColor:
    color: RgbColor
    request: ActionRequest = field(default_factory=ActionRequest, compare=False)
    name: ClassVar[str] = "color"


@dataclass(frozen=True)
class Blink:
    color: RgbColor
    interval_ms: int | None = None
    request: ActionRequest = field(default_factory=ActionRequest, compare=False)
    name: ClassVar[str] = "blink"


@dataclass(frozen=True)
class Blink2:
    color: RgbColor
    second_color: RgbColor
    interval_ms: int | None = None
    request: ActionRequest = field(default_factory=ActionRequest, compare=False)
    name: ClassVar[str] = "blink2"


@dataclass(frozen=True)
class Rainbow:
    interval_ms: int | None = None
    request: ActionRequest = field(default_factory=ActionRequest, compare=False)
    name: ClassVar[str] = "rainbow"


ResolvedAction = TurnOn | TurnOff | SetColor | Blink | Blink2 | Rainbow


@dataclass(frozen=True)
class EncodedCommand:
    wire: str
    warnings: tuple[str, ...] = ()


class ReplyStatus(Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class ResponseOutcome:
    status: ReplyStatus
    payload: str | None = None

    @property
    def accepted(self) -> bool:
        return self.status is ReplyStatus.ACCEPTED


@dataclass(frozen=True)
class ControlResult:
    port: str
    action: ResolvedAction
    command: EncodedCommand
    outcome: ResponseOutcome

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.command.warnings


@dataclass(frozen=True)
class Sketch:
    name: str
    path: str
    description: str = ""


@dataclass(frozen=True)
class LedSpec:
    protocol: ProtocolVariant
    pin: int | None = None
    count: int = 1


@dataclass(frozen=True)
class Board:
    id: str
    name: str
    fqbn: str
    status: str
    led: LedSpec
    baud_rate: int = 9600
    default_ports: dict[str, str] = field(default_factory=dict)
    sketches: dict[str, Sketch] = field(default_factory=dict)
    platform_package: str | None = None
    platform_index_url: str | None = None
    libraries: tuple[str, ...] = ()

    @property
    def variant(self) -> ProtocolVariant:
        return self.led.protocol

    def default_port(self, platform: str = sys.platform) -> str | None:
        """Typical serial port name for this board on `platform` (a ``sys.platform`` value)."""
        if platform.startswith("win"):
            key = "windows"
        elif platform == "darwin":
            key = "darwin"
        else:
            key = "linux"
        return self.default_ports.get(key)

    def supports_sketch(self, sketch: str) -> bool:
        return sketch in self.sketches


@dataclass(frozen=True)
class LedMapping:
    number: int
    port: str
    name: str


@dataclass(frozen=True)
class LedStatus:
    number: int
    status: str = "off"
    color: RgbColor | None = None
    brightness: int = 0
