from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from json_store import append_json_line


class ContactLog:
    """
    Append-only JSON-lines log of contact form submissions (data/contact.log).
    """

    def __init__(self, path: Path):
        self._path = path
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def append(self, entry: dict[str, Any]) -> None:
        async with self._lock:
            await asyncio.to_thread(append_json_line, self._path, entry)
