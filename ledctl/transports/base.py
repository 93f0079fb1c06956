"""Transport interfaces."""

from __future__ import annotations

from typing import Protocol


class Channel(Protocol):
    @property
    def is_open(self) -> bool: ...

    def connect(self) -> None:
        """Open the underlying device."""

    def disconnect(self) -> None:
        """Close the device if open. Never raises."""

    def write(self, command: str) -> None:
        """Transmit one newline-terminated command."""

    def read_line(self, timeout_s: float) -> str | None:
        """Return one complete line, or None if nothing complete arrived in time."""

    def discard_input(self) -> None:
        """Drop any buffered inbound bytes."""
