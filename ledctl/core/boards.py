"""Board definition loading and validation for YAML-based board files."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from ledctl.core.errors import BoardLoadError, BoardSelectionError, BoardValidationError
from ledctl.core.model import Board, LedSpec, ProtocolVariant, Sketch

_FQBN_RE = re.compile(r"^[A-Za-z0-9_.-]+:[A-Za-z0-9_.-]+:[A-Za-z0-9_.-]+(:.+)?$")
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise BoardValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedBoards:
    boards: dict[str, Board]
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("ledctl.schemas").joinpath("board.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _board_dirs() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "ledctl/boards", xdg_data / "ledctl/boards"


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise BoardLoadError(f"Could not read board file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise BoardValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise BoardValidationError(f"Board file {path} must contain a mapping at root")
    return loaded


def _build_board(doc: dict[str, Any], source: Path | Traversable) -> Board:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise BoardValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    if not _FQBN_RE.match(doc["fqbn"]):
        raise BoardValidationError(
            f"{doc['id']}.fqbn must look like vendor:architecture:board, got '{doc['fqbn']}'"
        )

    led_doc = doc.get("led", {})
    sketches = {
        name: Sketch(name=name, path=info["path"], description=info.get("description", ""))
        for name, info in doc.get("sketches", {}).items()
    }
    platform = doc.get("platform", {})
    serial_doc = doc.get("serial", {})

    return Board(
        id=doc["id"],
        name=doc["name"],
        fqbn=doc["fqbn"],
        status=doc.get("status", "supported"),
        led=LedSpec(
            protocol=ProtocolVariant.from_protocol(led_doc.get("protocol")),
            pin=led_doc.get("pin"),
            count=int(led_doc.get("count", 1)),
        ),
        baud_rate=int(serial_doc.get("baud_rate", 9600)),
        default_ports=dict(serial_doc.get("default_port", {})),
        sketches=sketches,
        platform_package=platform.get("package"),
        platform_index_url=platform.get("index_url"),
        libraries=tuple(doc.get("libraries", [])),
    )


def _iter_packaged_board_paths() -> list[Traversable]:
    board_root = resources.files("ledctl.boards")
    return [item for item in board_root.iterdir() if item.name.endswith((".yml", ".yaml"))]


def _iter_user_board_paths() -> list[Path]:
    paths: list[Path] = []
    for directory in _board_dirs():
        if not directory.exists() or not directory.is_dir():
            continue
        paths.extend(sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"}))
    return paths


def load_boards() -> LoadedBoards:
    boards: dict[str, Board] = {}
    warnings: list[str] = []

    for path in sorted(_iter_packaged_board_paths(), key=lambda p: p.name):
        doc = _read_yaml(path)
        board = _build_board(doc, path)
        boards[board.id] = board

    for path in _iter_user_board_paths():
        doc = _read_yaml(path)
        board = _build_board(doc, path)
        if board.id in boards:
            warning = f"User board '{board.id}' overrides packaged board"
            LOGGER.warning(warning)
            warnings.append(warning)
        boards[board.id] = board

    return LoadedBoards(boards=boards, warnings=tuple(warnings))


class BoardCatalog:
    def __init__(self, loaded: LoadedBoards | None = None) -> None:
        loaded = loaded or load_boards()
        self.boards = loaded.boards
        self.load_warnings = loaded.warnings

    def available(self) -> list[Board]:
        return sorted(
            (board for board in self.boards.values() if board.status != "planned"),
            key=lambda b: b.id,
        )

    def get(self, board_id: str) -> Board:
        board = self.boards.get(board_id)
        if board is None:
            available = ", ".join(sorted(self.boards))
            raise BoardSelectionError(f"Board '{board_id}' not found. Available boards: {available}")
        if board.status == "planned":
            raise BoardSelectionError(f"Board '{board_id}' support is planned but not yet implemented")
        return board
