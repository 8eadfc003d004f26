from __future__ import annotations

from dataclasses import replace
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def data_path(tmp_path: Path) -> Path:
    """
    Temp data directory so tests never touch the real ./data.
    """
    p = tmp_path / "data"
    p.mkdir(parents=True, exist_ok=True)
    return p


@pytest.fixture
def store_path(data_path: Path) -> Path:
    return data_path / "store.json"


@pytest.fixture
def test_settings(monkeypatch: pytest.MonkeyPatch, data_path: Path):
    from settings import get_settings

    for name in ("ALLOWED_ORIGINS", "RATE_LIMIT_PER_MINUTE", "CONTACT_RATE_LIMIT", "MAX_BODY_BYTES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DATA_DIR", str(data_path))
    return get_settings()


@pytest.fixture
def client(test_settings):
    from fastapi.testclient import TestClient

    import app as app_module

    application = app_module.create_app(test_settings)
    with TestClient(application, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def make_client(test_settings):
    """
    Build a client with overridden settings, e.g. make_client(contact_rate_limit=2).
    """
    from fastapi.testclient import TestClient

    import app as app_module

    clients: list[TestClient] = []

    def _make(**overrides):
        application = app_module.create_app(replace(test_settings, **overrides))
        c = TestClient(application, raise_server_exceptions=False)
        c.__enter__()
        clients.append(c)
        return c

    yield _make

    for c in clients:
        c.__exit__(None, None, None)
