from __future__ import annotations

import json
from json import JSONDecodeError
from pathlib import Path
from typing import Any

SETTINGS_SUFFIXES = (".json", ".toml", ".yaml", ".yml")


def _load_json(text: str, path: Path) -> Any:
    try:
        return json.loads(text)
    except JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path} at line {e.lineno}, column {e.colno}: {e.msg}") from e


def _load_toml(text: str, path: Path) -> Any:
    import tomllib

    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e


def _load_yaml(text: str, path: Path) -> Any:
    import yaml

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        if mark is not None and hasattr(mark, "line") and hasattr(mark, "column"):
            raise ValueError(f"Invalid YAML in {path} at line {mark.line + 1}, column {mark.column + 1}: {e}") from e
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def load_json_file(path: Path) -> Any:
    """Read a JSON document. A missing file raises FileNotFoundError."""
    return _load_json(path.read_text(encoding="utf-8"), path)


def load_mapping_file(path: Path) -> dict[str, Any]:
    """
    Read a settings document (JSON, TOML or YAML, chosen by suffix).

    An empty YAML file reads as an empty mapping; any other non-table top
    level is rejected.
    """
    suffix = path.suffix.lower()
    if suffix not in SETTINGS_SUFFIXES:
        raise ValueError(f"Unsupported file format for {path} (expected {', '.join(SETTINGS_SUFFIXES)}).")
    text = path.read_text(encoding="utf-8")
    if suffix == ".json":
        raw = _load_json(text, path)
    elif suffix == ".toml":
        raw = _load_toml(text, path)
    else:
        raw = _load_yaml(text, path)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a table/object at the top level")
    return raw
