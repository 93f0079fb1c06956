"""Numbered LED to serial port mapping and last-known LED status."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from ledctl.core.errors import RegistryError
from ledctl.core.model import (
    Blink,
    Blink2,
    ControlResult,
    LedMapping,
    LedStatus,
    Rainbow,
    SetColor,
    TurnOff,
    TurnOn,
)

MIN_LED_NUMBER = 1
MAX_LED_NUMBER = 100
LOGGER = logging.getLogger(__name__)


class LedRegistry:
    """In-memory only; statuses are not persisted across processes."""

    def __init__(self) -> None:
        self._mappings: dict[int, LedMapping] = {}
        self._statuses: dict[int, LedStatus] = {}
        self.load_warnings: tuple[str, ...] = ()

    def register(self, number: int, port: str, name: str) -> LedMapping:
        _check_number(number)
        if number in self._mappings:
            raise RegistryError(f"LED {number} is already registered")
        for mapping in self._mappings.values():
            if mapping.port == port:
                raise RegistryError(f"Port {port} is already in use by LED {mapping.number}")
        mapping = LedMapping(number=number, port=port, name=name)
        self._mappings[number] = mapping
        return mapping

    def unregister(self, number: int) -> None:
        self._mappings.pop(number, None)
        self._statuses.pop(number, None)

    def port_for(self, number: int) -> str:
        _check_number(number)
        mapping = self._mappings.get(number)
        if mapping is None:
            raise RegistryError(f"LED {number} is not configured")
        return mapping.port

    def all(self) -> list[LedMapping]:
        return sorted(self._mappings.values(), key=lambda m: m.number)

    def load_from_env(self, environ: Mapping[str, str] | None = None) -> None:
        env = os.environ if environ is None else environ
        self._mappings.clear()
        warnings: list[str] = []
        for number in range(MIN_LED_NUMBER, MAX_LED_NUMBER + 1):
            port = env.get(f"LED_{number}_PORT")
            name = env.get(f"LED_{number}_NAME")
            if not port or not name:
                continue
            try:
                self.register(number, port, name)
            except RegistryError as exc:
                warning = f"Failed to register LED {number}: {exc}"
                LOGGER.warning(warning)
                warnings.append(warning)
        self.load_warnings = tuple(warnings)

    def record(self, number: int, result: ControlResult) -> LedStatus:
        """Store the state implied by an accepted command."""
        if not result.outcome.accepted:
            return self.status(number)

        action = result.action
        previous = self.status(number)
        brightness = action.request.brightness
        if isinstance(action, TurnOff):
            status = LedStatus(number=number, status="off", brightness=0)
        else:
            if isinstance(action, TurnOn):
                state, color = "on", previous.color
            elif isinstance(action, SetColor):
                state, color = "on", action.color
            elif isinstance(action, (Blink, Blink2)):
                state, color = "blink", action.color
            elif isinstance(action, Rainbow):
                state, color = "rainbow", None
            else:
                raise TypeError(f"Unsupported action: {action!r}")
            status = LedStatus(
                number=number,
                status=state,
                color=color,
                brightness=brightness if brightness is not None else 100,
            )
        self._statuses[number] = status
        return status

    def status(self, number: int) -> LedStatus:
        _check_number(number)
        return self._statuses.get(number, LedStatus(number=number))


def _check_number(number: int) -> None:
    if isinstance(number, bool) or not isinstance(number, int):
        raise RegistryError(f"LED number must be an integer, got {number!r}")
    if not MIN_LED_NUMBER <= number <= MAX_LED_NUMBER:
        raise RegistryError(
            f"LED number must be between {MIN_LED_NUMBER} and {MAX_LED_NUMBER}, got {number}"
        )
