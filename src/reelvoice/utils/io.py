"""Settings (YAML) and run report (JSON) files, replaced atomically."""

from __future__ import annotations

import io
import json
import tempfile
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

_yaml = YAML()
_yaml.default_flow_style = False


def write_atomic(path: Path | str, text: str) -> None:
    """Write ``text`` next to ``path`` and rename it into place."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w", dir=path.parent, suffix=path.suffix, delete=False
    ) as tmp:
        tmp.write(text)
    Path(tmp.name).replace(path)


def read_yaml(path: Path | str) -> dict:
    with open(path) as f:
        return _plain(_yaml.load(f) or {})


def write_yaml(path: Path | str, data: dict) -> None:
    buffer = io.StringIO()
    _yaml.dump(data, buffer)
    write_atomic(path, buffer.getvalue())


def read_json(path: Path | str) -> Any:
    with open(path) as f:
        return json.load(f)


def write_json(path: Path | str, data: Any) -> None:
    """Write a run report; paths and other non-JSON values are stringified."""
    write_atomic(path, json.dumps(data, indent=2, default=str) + "\n")


def _plain(value: Any) -> Any:
    # ruamel returns CommentedMap/CommentedSeq; pydantic wants builtins
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value
