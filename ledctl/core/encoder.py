"""Wire command rendering for the UniversalLedControl firmware."""

from __future__ import annotations

from ledctl.core.colors import WHITE
from ledctl.core.model import (
    Blink,
    Blink2,
    EncodedCommand,
    ProtocolVariant,
    Rainbow,
    ResolvedAction,
    RgbColor,
    SetColor,
    TurnOff,
    TurnOn,
)

DEFAULT_BLINK_INTERVAL_MS = 500
DEFAULT_RAINBOW_INTERVAL_MS = 50


def encode(action: ResolvedAction, variant: ProtocolVariant) -> EncodedCommand:
    """Render `action` to a newline-terminated wire command for `variant`.

    Binary-only boards cannot interpret color or interval parameters, so those
    actions degrade to ``ON``/``BLINK`` and a warning describes what was dropped.
    """
    if variant is ProtocolVariant.BINARY_ONLY:
        line, warnings = _encode_binary(action)
    else:
        line, warnings = _encode_full_color(action), []
    return EncodedCommand(wire=f"{line}\n", warnings=tuple(warnings))


def _encode_full_color(action: ResolvedAction) -> str:
    if isinstance(action, TurnOn):
        return "ON"
    if isinstance(action, TurnOff):
        return "OFF"
    if isinstance(action, SetColor):
        return f"COLOR,{action.color}"
    if isinstance(action, Blink):
        return f"BLINK1,{action.color},{_blink_interval(action.interval_ms)}"
    if isinstance(action, Blink2):
        return (
            f"BLINK2,{action.color},{action.second_color},"
            f"{_blink_interval(action.interval_ms)}"
        )
    if isinstance(action, Rainbow):
        interval = action.interval_ms if action.interval_ms is not None else DEFAULT_RAINBOW_INTERVAL_MS
        return f"RAINBOW,{interval}"
    raise TypeError(f"Unsupported action: {action!r}")


def _encode_binary(action: ResolvedAction) -> tuple[str, list[str]]:
    warnings: list[str] = []
    if isinstance(action, TurnOn):
        return "ON", warnings
    if isinstance(action, TurnOff):
        return "OFF", warnings
    if isinstance(action, SetColor):
        if action.color != WHITE:
            label = _label(action.request.color, action.color)
            warnings.append(
                f"Digital LED does not support colors. Color '{label}' ignored, turning LED on."
            )
        return "ON", warnings
    if isinstance(action, Blink):
        if action.color != WHITE:
            label = _label(_primary_spec(action), action.color)
            warnings.append(
                f"Digital LED does not support colors. Color '{label}' ignored, blinking LED."
            )
        warnings.extend(_interval_warning(action.interval_ms))
        return "BLINK", warnings
    if isinstance(action, Blink2):
        first = _label(_primary_spec(action), action.color)
        second = _label(action.request.second_color, action.second_color)
        warnings.append(
            "Digital LED does not support multi-color blinking. "
            f"Colors '{first}' and '{second}' ignored, using single-color blink."
        )
        warnings.extend(_interval_warning(action.interval_ms))
        return "BLINK", warnings
    if isinstance(action, Rainbow):
        warnings.append("Digital LED does not support rainbow effect. Using simple blink instead.")
        warnings.extend(_interval_warning(action.interval_ms))
        return "BLINK", warnings
    raise TypeError(f"Unsupported action: {action!r}")


def _blink_interval(interval_ms: int | None) -> int:
    return interval_ms if interval_ms is not None else DEFAULT_BLINK_INTERVAL_MS


def _interval_warning(interval_ms: int | None) -> list[str]:
    if interval_ms is None:
        return []
    return [f"Digital LED uses a fixed blink rate. Interval {interval_ms}ms ignored."]


def _primary_spec(action: Blink | Blink2) -> str | None:
    request = action.request
    if isinstance(request.blink, str):
        return request.blink
    return request.color


def _label(spec: str | None, color: RgbColor) -> str:
    return spec if spec else str(color)
