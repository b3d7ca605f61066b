from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the postboard package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from postboard.app import create_app  # noqa: E402
from postboard.core import config as core_config  # noqa: E402
from postboard.core.config import Settings  # noqa: E402
from postboard.repositories import DocumentStore, PostRepository, UserRepository  # noqa: E402


def make_settings(data_dir: Path, **overrides) -> Settings:
    values = dict(
        app_env="test",
        data_dir=data_dir,
        log_level="WARNING",
        log_file="",
        host="127.0.0.1",
        port=5000,
        cors_origins=("*",),
        require_known_owner=True,
        auth_rate_limit=1000,
        auth_rate_window_seconds=60,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture()
def data_dir(tmp_path, monkeypatch):
    """Point DATA_DIR at a temporary directory and reset the settings cache."""
    directory = tmp_path / "data"
    monkeypatch.setenv("DATA_DIR", str(directory))
    core_config.get_settings.cache_clear()
    yield directory
    core_config.get_settings.cache_clear()


@pytest.fixture()
def users(data_dir) -> UserRepository:
    return UserRepository(DocumentStore(data_dir / "users.json"))


@pytest.fixture()
def posts(data_dir, users) -> PostRepository:
    return PostRepository(DocumentStore(data_dir / "posts.json"), users, require_known_owner=False)


@pytest.fixture()
def app(data_dir):
    return create_app(make_settings(data_dir))


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
