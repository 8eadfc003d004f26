from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None:
        return default
    items = [item.strip() for item in raw.split(",") if item.strip()]
    return items or default


@dataclass(frozen=True)
class Settings:
    # Storage
    data_dir: Path

    # Server
    host: str
    port: int
    allowed_origins: list[str]

    # Request limits
    rate_limit_per_minute: int
    contact_rate_limit: int
    contact_rate_window_seconds: int
    max_body_bytes: int

    # Logging
    log_level: str
    debug_log_requests: bool


def get_settings() -> Settings:
    default_data_dir = Path(__file__).resolve().parent / "data"
    data_dir = Path(os.getenv("DATA_DIR", "") or default_data_dir)

    return Settings(
        data_dir=data_dir,
        host=os.getenv("HOST", "127.0.0.1"),
        port=_env_int("PORT", 3000),
        allowed_origins=_env_list("ALLOWED_ORIGINS", ["*"]),
        rate_limit_per_minute=_env_int("RATE_LIMIT_PER_MINUTE", 60),
        contact_rate_limit=_env_int("CONTACT_RATE_LIMIT", 5),
        contact_rate_window_seconds=_env_int("CONTACT_RATE_WINDOW_SECONDS", 15 * 60),
        # 10kb, same as the JSON body limit the frontend was built against
        max_body_bytes=_env_int("MAX_BODY_BYTES", 10 * 1024),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        debug_log_requests=_env_bool("DEBUG_LOG_REQUESTS", False),
    )
