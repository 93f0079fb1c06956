"""Serial channel implementation using pyserial."""

from __future__ import annotations

import logging

import serial

from ledctl.core.errors import (
    NotConnectedError,
    SerialConnectError,
    SerialReadError,
    SerialWriteError,
)

DEFAULT_BAUD_RATE = 9600
LOGGER = logging.getLogger(__name__)


class SerialChannel:
    """One open serial connection. Does not interpret payloads."""

    def __init__(self, port: str, baud_rate: int = DEFAULT_BAUD_RATE) -> None:
        self.port = port
        self.baud_rate = baud_rate
        self._serial: serial.Serial | None = None
        self._partial = b""
        self._read_timeout = 0.0

    def __enter__(self) -> SerialChannel:
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    @property
    def is_open(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def connect(self) -> None:
        if self.is_open:
            return
        try:
            self._serial = serial.Serial(self.port, baudrate=self.baud_rate, timeout=0)
        except (serial.SerialException, OSError, ValueError) as exc:
            raise SerialConnectError(f"Failed to open port {self.port}: {exc}") from exc
        self._partial = b""
        self._read_timeout = 0.0
        LOGGER.debug("Opened %s at %d baud", self.port, self.baud_rate)

    def disconnect(self) -> None:
        if self._serial is None:
            return
        try:
            if self._serial.is_open:
                self._serial.close()
        except (serial.SerialException, OSError) as exc:
            LOGGER.warning("Error while closing %s: %s", self.port, exc)
        finally:
            self._serial = None
            self._partial = b""
        LOGGER.debug("Closed %s", self.port)

    def write(self, command: str) -> None:
        port = self._require_open()
        try:
            port.write(command.encode("ascii"))
            port.flush()
        except UnicodeEncodeError as exc:
            raise SerialWriteError(f"Failed to send command: non-ASCII payload {command!r}") from exc
        except (serial.SerialException, OSError) as exc:
            raise SerialWriteError(f"Failed to send command: {exc}") from exc

    def read_line(self, timeout_s: float) -> str | None:
        port = self._require_open()
        try:
            timeout = max(timeout_s, 0.0)
            # pyserial reconfigures the port on every timeout assignment.
            if timeout != self._read_timeout:
                port.timeout = timeout
                self._read_timeout = timeout
            chunk = port.readline()
        except (serial.SerialException, OSError) as exc:
            raise SerialReadError(f"Failed to read from {self.port}: {exc}") from exc

        if not chunk:
            return None
        data = self._partial + chunk
        if not data.endswith(b"\n"):
            # Incomplete line; keep it until the rest arrives.
            self._partial = data
            return None
        self._partial = b""
        return data.decode("ascii", errors="replace").strip()

    def discard_input(self) -> None:
        port = self._require_open()
        self._partial = b""
        try:
            port.reset_input_buffer()
        except (serial.SerialException, OSError) as exc:
            raise SerialReadError(f"Failed to reset input on {self.port}: {exc}") from exc

    def _require_open(self) -> serial.Serial:
        if self._serial is None or not self._serial.is_open:
            raise NotConnectedError(f"Serial port {self.port} is not open. Call connect() first.")
        return self._serial
