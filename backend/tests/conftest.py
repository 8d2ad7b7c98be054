from pathlib import Path
import pytest
from fastapi.testclient import TestClient

from learning_penguin.config import Settings
from learning_penguin.main import create_app


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Settings pointing at a throwaway SQLite file and upload directory."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("MAX_UPLOAD_BYTES", str(64 * 1024))
    return Settings()


@pytest.fixture
def upload_dir(settings) -> Path:
    return settings.UPLOAD_DIR


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # entering the context runs the lifespan, which opens the store
    with TestClient(app) as c:
        yield c
