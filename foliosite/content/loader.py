"""Read the JSON content collections from disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..config import Config
from ..errors import MissingDataFileError, SchemaShapeError


def load_collections(config: Config) -> dict[str, Any]:
    """Parse every configured collection file into plain JSON values."""
    payloads: dict[str, Any] = {}
    for name, filename in config.data_files.items():
        payloads[name] = load_json_file(config.data_dir / filename, config)
    return payloads


def load_json_file(path: Path, config: Config) -> Any:
    """Parse one JSON file, rejecting duplicate keys and non-finite numbers."""
    label = config.display_path(path)
    if not path.is_file():
        raise MissingDataFileError("data file not found", path=label)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise SchemaShapeError("data file is not valid UTF-8", path=label, reason="InvalidJson") from exc
    try:
        return json.loads(
            text,
            object_pairs_hook=_reject_duplicate_keys,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as exc:
        raise SchemaShapeError(
            f"invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            path=label,
            reason="InvalidJson",
        ) from exc
    except ValueError as exc:
        raise SchemaShapeError(f"invalid JSON: {exc}", path=label, reason="InvalidJson") from exc


def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"duplicate key '{key}'")
        result[key] = value
    return result


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number '{name}' is not allowed")
