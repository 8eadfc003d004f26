from __future__ import annotations

from pathlib import Path

from settings import Settings


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def data_dir(settings: Settings) -> Path:
    return ensure_dir(settings.data_dir)


def store_file(data_dir: Path) -> Path:
    return data_dir / "store.json"


def contact_log_file(data_dir: Path) -> Path:
    return data_dir / "contact.log"
