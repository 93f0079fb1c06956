from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from ledctl.core.errors import BoardSelectionError, ToolchainError
from ledctl.core.model import Board, LedSpec, ProtocolVariant, Sketch
from ledctl.core.toolchain import ArduinoCli, resolve_sketch_dir


def _cp(cmd: list[str], rc: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(cmd, rc, stdout=stdout, stderr=stderr)


def _board() -> Board:
    return Board(
        id="xiao-rp2040",
        name="Seeed XIAO RP2040",
        fqbn="rp2040:rp2040:seeed_xiao_rp2040",
        status="supported",
        led=LedSpec(protocol=ProtocolVariant.FULL_COLOR),
        sketches={"UniversalLedControl": Sketch(name="UniversalLedControl", path="sketches/ulc")},
        platform_package="rp2040:rp2040",
        platform_index_url="https://example.invalid/index.json",
        libraries=("Adafruit NeoPixel",),
    )


def test_compile_invokes_arduino_cli(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd, check, capture_output, text):
        calls.append(cmd)
        return _cp(cmd, 0, stdout="Sketch uses 1234 bytes\n")

    monkeypatch.setattr(subprocess, "run", fake_run)

    output = ArduinoCli(log_level="debug").compile(_board(), tmp_path)
    assert "1234 bytes" in output
    assert calls[0][:4] == ["arduino-cli", "--log", "--log-level", "debug"]
    assert calls[0][4:7] == ["compile", "--fqbn", "rp2040:rp2040:seeed_xiao_rp2040"]
    assert calls[0][-1] == str(tmp_path)


def test_upload_passes_port_and_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd, check, capture_output, text):
        calls.append(cmd)
        return _cp(cmd, 0)

    monkeypatch.setattr(subprocess, "run", fake_run)

    ArduinoCli(config_file=tmp_path / "arduino-cli.yaml").upload(_board(), tmp_path, "COM3")
    cmd = calls[0]
    assert "--config-file" in cmd
    assert cmd[cmd.index("--port") + 1] == "COM3"


def test_install_runs_core_and_libraries(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd, check, capture_output, text):
        calls.append(cmd)
        return _cp(cmd, 0)

    monkeypatch.setattr(subprocess, "run", fake_run)

    ArduinoCli().install(_board())
    subcommands = [cmd[4:6] for cmd in calls]
    assert subcommands == [["core", "update-index"], ["core", "install"], ["lib", "install"]]
    assert "--additional-urls" in calls[1]
    assert calls[2][-1] == "Adafruit NeoPixel"


def test_nonzero_exit_raises_with_stderr(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd, check, capture_output, text):
        return _cp(cmd, 1, stderr="Platform 'rp2040:rp2040' not found")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(ToolchainError) as exc:
        ArduinoCli().compile(_board(), tmp_path)
    assert "not found" in str(exc.value)


def test_missing_executable_raises(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd, check, capture_output, text):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(ToolchainError):
        ArduinoCli().compile(_board(), tmp_path)


def test_unknown_log_level_rejected() -> None:
    with pytest.raises(ToolchainError):
        ArduinoCli(log_level="verbose")


def test_resolve_sketch_dir(tmp_path: Path) -> None:
    (tmp_path / "sketches" / "ulc").mkdir(parents=True)
    assert resolve_sketch_dir(_board(), "UniversalLedControl", tmp_path) == tmp_path / "sketches" / "ulc"


def test_resolve_sketch_dir_errors(tmp_path: Path) -> None:
    with pytest.raises(BoardSelectionError):
        resolve_sketch_dir(_board(), "LEDBlink", tmp_path)
    with pytest.raises(BoardSelectionError):
        resolve_sketch_dir(_board(), "UniversalLedControl", tmp_path)
