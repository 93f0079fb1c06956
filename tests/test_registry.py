from __future__ import annotations

import pytest

from ledctl.core.colors import WHITE
from ledctl.core.errors import RegistryError
from ledctl.core.model import (
    ActionRequest,
    Blink,
    ControlResult,
    EncodedCommand,
    Rainbow,
    ReplyStatus,
    ResponseOutcome,
    RgbColor,
    SetColor,
    TurnOff,
    TurnOn,
)
from ledctl.core.registry import LedRegistry

RED = RgbColor(255, 0, 0)


def _result(action, status: ReplyStatus = ReplyStatus.ACCEPTED) -> ControlResult:
    return ControlResult(
        port="COM3",
        action=action,
        command=EncodedCommand(wire="X\n"),
        outcome=ResponseOutcome(status=status, payload="ACCEPTED,X"),
    )


def test_register_and_lookup() -> None:
    registry = LedRegistry()
    registry.register(2, "COM4", "Desk")
    registry.register(1, "COM3", "Shelf")
    assert registry.port_for(1) == "COM3"
    assert [m.number for m in registry.all()] == [1, 2]


def test_duplicate_number_and_port_rejected() -> None:
    registry = LedRegistry()
    registry.register(1, "COM3", "Shelf")
    with pytest.raises(RegistryError):
        registry.register(1, "COM4", "Other")
    with pytest.raises(RegistryError):
        registry.register(2, "COM3", "Other")


@pytest.mark.parametrize("number", [0, 101, True])
def test_number_range_enforced(number: int) -> None:
    with pytest.raises(RegistryError):
        LedRegistry().register(number, "COM3", "x")


def test_unconfigured_led_raises() -> None:
    with pytest.raises(RegistryError) as exc:
        LedRegistry().port_for(5)
    assert "not configured" in str(exc.value)


def test_load_from_env_collects_warnings() -> None:
    registry = LedRegistry()
    registry.load_from_env(
        {
            "LED_1_PORT": "COM3",
            "LED_1_NAME": "Shelf",
            "LED_2_PORT": "COM3",
            "LED_2_NAME": "Clash",
            "LED_3_PORT": "COM5",
        }
    )
    assert [m.number for m in registry.all()] == [1]
    assert len(registry.load_warnings) == 1
    assert "LED 2" in registry.load_warnings[0]


def test_unregister_forgets_status() -> None:
    registry = LedRegistry()
    registry.register(1, "COM3", "Shelf")
    registry.record(1, _result(TurnOn()))
    registry.unregister(1)
    assert registry.status(1).status == "off"
    with pytest.raises(RegistryError):
        registry.port_for(1)


def test_status_defaults_to_off() -> None:
    status = LedRegistry().status(3)
    assert status.status == "off"
    assert status.color is None
    assert status.brightness == 0


def test_record_tracks_accepted_actions() -> None:
    registry = LedRegistry()
    assert registry.record(1, _result(SetColor(color=RED))).color == RED
    on = registry.record(1, _result(TurnOn()))
    assert on.status == "on"
    assert on.color == RED
    blink = registry.record(1, _result(Blink(color=WHITE, request=ActionRequest(blink=True, brightness=40))))
    assert blink.status == "blink"
    assert blink.brightness == 40
    assert registry.record(1, _result(Rainbow())).status == "rainbow"
    off = registry.record(1, _result(TurnOff()))
    assert off.status == "off"
    assert off.brightness == 0


def test_record_ignores_soft_failures() -> None:
    registry = LedRegistry()
    registry.record(1, _result(TurnOn()))
    status = registry.record(1, _result(TurnOff(), ReplyStatus.TIMED_OUT))
    assert status.status == "on"
    assert registry.record(1, _result(TurnOff(), ReplyStatus.REJECTED)).status == "on"
