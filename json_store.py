from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def read_json(path: Path) -> Any:
    """
    Read JSON from disk.

    Raises FileNotFoundError for a missing file and json.JSONDecodeError (a ValueError)
    for empty or invalid content, so callers can tell "absent" from "corrupt".
    """
    raw = path.read_text(encoding="utf-8")
    return json.loads(raw)


def write_json(path: Path, payload: Any, *, indent: int = 2) -> None:
    """
    Write JSON to disk, overwriting the file in place.

    The payload is serialized before the file is opened, so an unserializable payload
    leaves the old file alone. The write itself is not atomic: a crash mid-write can
    leave a truncated file behind.
    """
    text = json.dumps(payload, indent=indent) + "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def append_json_line(path: Path, payload: Any) -> None:
    line = json.dumps(payload) + "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(line)
