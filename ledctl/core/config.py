"""Environment-driven settings."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from ledctl.core.correlator import DEFAULT_REPLY_TIMEOUT_S
from ledctl.core.errors import ConfigError, PortResolutionError

DEFAULT_BOARD = "xiao-rp2040"


@dataclass(frozen=True)
class Settings:
    serial_port: str | None = None
    board: str = DEFAULT_BOARD
    reply_timeout_s: float = DEFAULT_REPLY_TIMEOUT_S

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            serial_port=env.get("SERIAL_PORT") or None,
            board=env.get("LEDCTL_BOARD") or DEFAULT_BOARD,
            reply_timeout_s=_parse_timeout(env.get("LEDCTL_REPLY_TIMEOUT")),
        )

    def resolve_serial_port(self, cli_port: str | None = None) -> str:
        if cli_port:
            return cli_port
        if self.serial_port:
            return self.serial_port
        raise PortResolutionError(
            "Serial port not specified. Provide --port or set the SERIAL_PORT environment variable"
        )


def _parse_timeout(raw: str | None) -> float:
    if raw is None or raw.strip() == "":
        return DEFAULT_REPLY_TIMEOUT_S
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"LEDCTL_REPLY_TIMEOUT must be a number of seconds, got '{raw}'") from exc
    if value <= 0:
        raise ConfigError(f"LEDCTL_REPLY_TIMEOUT must be positive, got '{raw}'")
    return value
