import os
import shutil
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

UPLOAD_DIR = tempfile.mkdtemp(prefix="blogsite-uploads-")

os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["UPLOAD_DIR"] = UPLOAD_DIR
os.environ["ENFORCE_BLOG_OWNERSHIP"] = "false"

from blogsite.core.config import get_settings
from blogsite.db.base import Base
from blogsite.db.session import SessionLocal, engine
from blogsite.main import create_app
from blogsite.services.storage import LocalUploadStorage


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    path = Path("test.db")
    if path.exists():
        path.unlink()


@pytest.fixture(autouse=True)
def clean_uploads():
    yield
    for entry in Path(UPLOAD_DIR).iterdir():
        if entry.is_dir():
            shutil.rmtree(entry)
        else:
            entry.unlink()


@pytest.fixture()
def upload_dir() -> Path:
    return Path(UPLOAD_DIR)


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def storage(tmp_path):
    return LocalUploadStorage(tmp_path / "uploads")


@pytest.fixture()
def app():
    return create_app()


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def owner_only_client():
    settings = get_settings().model_copy(update={"enforce_blog_ownership": True})
    with TestClient(create_app(settings)) as test_client:
        yield test_client
