"""Thin arduino-cli wrapper for compiling, uploading, and installing sketches."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from ledctl.core.errors import BoardSelectionError, ToolchainError
from ledctl.core.model import Board

LOG_LEVELS = ("trace", "debug", "info", "warn", "error")
LOGGER = logging.getLogger(__name__)


def resolve_sketch_dir(board: Board, sketch: str, root: Path) -> Path:
    if not board.supports_sketch(sketch):
        available = ", ".join(sorted(board.sketches)) or "<none>"
        raise BoardSelectionError(
            f"Sketch '{sketch}' is not supported on {board.name}. Available: {available}"
        )
    sketch_dir = root / board.sketches[sketch].path
    if not sketch_dir.is_dir():
        raise BoardSelectionError(f"Sketch directory '{sketch_dir}' not found")
    return sketch_dir


class ArduinoCli:
    def __init__(
        self,
        executable: str = "arduino-cli",
        *,
        config_file: Path | None = None,
        log_level: str = "info",
    ) -> None:
        if log_level not in LOG_LEVELS:
            raise ToolchainError(f"Unknown log level '{log_level}'. Allowed: {', '.join(LOG_LEVELS)}")
        self.executable = executable
        self.config_file = config_file
        self.log_level = log_level

    def compile(self, board: Board, sketch_dir: Path) -> str:
        build_dir = sketch_dir / "build"
        return self._run(
            ["compile", "--fqbn", board.fqbn, "--build-path", str(build_dir), str(sketch_dir)]
        )

    def upload(self, board: Board, sketch_dir: Path, port: str) -> str:
        return self._run(["upload", "--port", port, "--fqbn", board.fqbn, str(sketch_dir)])

    def install(self, board: Board) -> str:
        output: list[str] = []
        if board.platform_package:
            urls = ["--additional-urls", board.platform_index_url] if board.platform_index_url else []
            output.append(self._run(["core", "update-index", *urls]))
            output.append(self._run(["core", "install", board.platform_package, *urls]))
        for library in board.libraries:
            output.append(self._run(["lib", "install", library]))
        return "".join(output)

    def _base_args(self) -> list[str]:
        args = [self.executable, "--log", "--log-level", self.log_level]
        if self.config_file is not None:
            args.extend(["--config-file", str(self.config_file)])
        return args

    def _run(self, args: Sequence[str]) -> str:
        cmd = [*self._base_args(), *args]
        LOGGER.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                check=False,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise ToolchainError(
                f"Failed to execute {self.executable}: not found on PATH"
            ) from exc

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise ToolchainError(
                f"{self.executable} {' '.join(args)} failed with code {result.returncode}: {stderr}"
            )
        return result.stdout
