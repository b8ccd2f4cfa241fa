from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..errors import ConfigError, InvalidOptionsConfig

__all__ = [
    "load_schema_file",
    "parse_options_arg",
]


def load_schema_file(path: str | Path) -> Any:
    """Read a JSON schema file. Any failure is fatal for the run."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise ConfigError(f"failed to read schema file {path}: {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON schema in {path}: {e}") from e


def parse_options_arg(arg: str | None) -> dict[str, Any] | None:
    """Parse the model options JSON string; ``None`` when not given."""
    if arg is None or not arg.strip():
        return None
    try:
        opts = json.loads(arg)
    except json.JSONDecodeError as e:
        raise InvalidOptionsConfig(f"options are not valid JSON: {e}") from e
    if not isinstance(opts, dict):
        raise InvalidOptionsConfig(
            f"options must be a JSON object, got {type(opts).__name__}"
        )
    return opts
