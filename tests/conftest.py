"""Shared fixtures for catalog tests."""

import hashlib
import os
import tempfile
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

# Keep import-time settings (log file, default paths) out of the working tree
_SESSION_DIR = Path(tempfile.mkdtemp(prefix="catalog-tests-"))
os.environ.setdefault("LOG_FILE", str(_SESSION_DIR / "logs" / "app.log"))
os.environ.setdefault("ITEMS_FILE", str(_SESSION_DIR / "items.json"))
os.environ.setdefault("DATABASE_PATH", str(_SESSION_DIR / "db" / "items.db"))
os.environ.setdefault("IMAGE_DIR", str(_SESSION_DIR / "images"))

from fastapi.testclient import TestClient  # noqa: E402

from catalog.core.config import Settings  # noqa: E402
from catalog.services.json_catalog import JsonCatalogStore  # noqa: E402
from catalog.services.sql_catalog import SqlCatalogStore  # noqa: E402
from catalog.utils.file_upload import ImageStore  # noqa: E402


def create_test_image(color: str = "red") -> bytes:
    """Create a small JPEG in memory."""
    img = Image.new("RGB", (32, 32), color=color)
    img_bytes = BytesIO()
    img.save(img_bytes, format="JPEG")
    return img_bytes.getvalue()


def hashed_name(filename: str) -> str:
    return hashlib.sha256(filename.encode("utf-8")).hexdigest() + ".jpg"


@pytest.fixture
def jpeg_bytes() -> bytes:
    return create_test_image()


@pytest.fixture
def image_store(tmp_path: Path) -> ImageStore:
    store = ImageStore(image_dir=str(tmp_path / "images"))
    store.ensure_default_image()
    return store


@pytest.fixture
def json_store(tmp_path: Path) -> JsonCatalogStore:
    return JsonCatalogStore(str(tmp_path / "items.json"))


@pytest.fixture
def sql_store(tmp_path: Path):
    store = SqlCatalogStore(str(tmp_path / "db" / "items.db"))
    yield store
    store.close()


@pytest.fixture(params=["json", "sqlite"])
def catalog_store(request, json_store, sql_store):
    """Run a test against both catalog backends."""
    return json_store if request.param == "json" else sql_store


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = dict(
        catalog_backend="json",
        items_file=str(tmp_path / "items.json"),
        database_path=str(tmp_path / "db" / "items.db"),
        image_dir=str(tmp_path / "images"),
        log_file=str(tmp_path / "logs" / "app.log"),
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(params=["json", "sqlite"])
def backend(request) -> str:
    return request.param


@pytest.fixture
def app_settings(tmp_path: Path, backend: str) -> Settings:
    return make_settings(tmp_path, catalog_backend=backend)


@pytest.fixture
def client(app_settings: Settings):
    from main import create_app

    with TestClient(create_app(app_settings)) as test_client:
        yield test_client
