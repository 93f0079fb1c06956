"""Select exactly one LED action from a bag of request flags."""

from __future__ import annotations

from ledctl.core.colors import WHITE, resolve_color
from ledctl.core.errors import (
    InvalidBrightnessError,
    InvalidCombinationError,
    InvalidIntervalError,
    NoActionSpecifiedError,
)
from ledctl.core.model import (
    ActionRequest,
    Blink,
    Blink2,
    Rainbow,
    ResolvedAction,
    SetColor,
    TurnOff,
    TurnOn,
)

MIN_INTERVAL_MS = 50
MAX_INTERVAL_MS = 5000
MIN_BRIGHTNESS = 0
MAX_BRIGHTNESS = 100

# Highest priority first.
PRIORITY: tuple[str, ...] = ("on", "off", "rainbow", "blink", "color")


def resolve_action(request: ActionRequest) -> ResolvedAction:
    _validate(request)

    selected = next((flag for flag in PRIORITY if getattr(request, flag)), None)
    if selected is None:
        raise NoActionSpecifiedError(
            "No action specified. Use --on, --off, --color, --blink, or --rainbow"
        )

    if request.second_color and selected != "blink":
        raise InvalidCombinationError(
            f"Second color can only be used with blink (selected action: {selected})"
        )

    if selected == "on":
        return TurnOn(request=request)
    if selected == "off":
        return TurnOff(request=request)
    if selected == "rainbow":
        return Rainbow(interval_ms=request.interval, request=request)
    if selected == "blink":
        primary_spec = request.blink if isinstance(request.blink, str) else request.color
        primary = resolve_color(primary_spec) if primary_spec else WHITE
        if request.second_color:
            return Blink2(
                color=primary,
                second_color=resolve_color(request.second_color),
                interval_ms=request.interval,
                request=request,
            )
        return Blink(color=primary, interval_ms=request.interval, request=request)
    return SetColor(color=resolve_color(request.color), request=request)


def _validate(request: ActionRequest) -> None:
    interval = request.interval
    if interval is not None:
        if isinstance(interval, bool) or not isinstance(interval, int):
            raise InvalidIntervalError(f"Interval must be an integer number of milliseconds, got {interval!r}")
        if not MIN_INTERVAL_MS <= interval <= MAX_INTERVAL_MS:
            raise InvalidIntervalError(
                f"Interval {interval} out of range. Must be between "
                f"{MIN_INTERVAL_MS} and {MAX_INTERVAL_MS} milliseconds"
            )

    brightness = request.brightness
    if brightness is not None:
        if isinstance(brightness, bool) or not isinstance(brightness, int):
            raise InvalidBrightnessError(f"Brightness must be an integer, got {brightness!r}")
        if not MIN_BRIGHTNESS <= brightness <= MAX_BRIGHTNESS:
            raise InvalidBrightnessError(
                f"Brightness {brightness} out of range. Must be between "
                f"{MIN_BRIGHTNESS} and {MAX_BRIGHTNESS}"
            )
