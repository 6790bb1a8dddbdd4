"""Tests for the add-item coordination between catalog and image stores."""

import asyncio
import logging
from io import BytesIO
from unittest.mock import patch

import pytest
from fastapi import UploadFile

from catalog.core.decorator import (
    InvalidImageFormat,
    StorageException,
    ValidationException,
)
from catalog.services.item import ItemService
from conftest import hashed_name


def make_upload(data: bytes, filename: str) -> UploadFile:
    return UploadFile(file=BytesIO(data), filename=filename)


def add(service: ItemService, name: str, category: str, upload):
    return asyncio.run(service.add_item(name, category, upload))


class TestAddItem:
    def test_stores_metadata_and_image(self, catalog_store, image_store, jpeg_bytes):
        service = ItemService(catalog_store, image_store)

        item = add(service, "shoes", "fashion", make_upload(jpeg_bytes, "shoes.jpg"))

        assert item.image_file_name == hashed_name("shoes.jpg")
        assert (image_store.image_dir / item.image_file_name).read_bytes() == jpeg_bytes
        assert catalog_store.list_items() == [item]

    def test_directory_in_upload_name_is_not_hashed(self, catalog_store, image_store, jpeg_bytes):
        service = ItemService(catalog_store, image_store)

        item = add(service, "shoes", "fashion", make_upload(jpeg_bytes, "photos/shoes.jpg"))

        assert item.image_file_name == hashed_name("shoes.jpg")
        assert (image_store.image_dir / item.image_file_name).is_file()

    def test_missing_upload_is_rejected(self, catalog_store, image_store):
        service = ItemService(catalog_store, image_store)

        with pytest.raises(ValidationException):
            add(service, "shoes", "fashion", None)
        assert catalog_store.list_items() == []

    def test_bad_extension_stores_nothing(self, catalog_store, image_store):
        service = ItemService(catalog_store, image_store)

        with pytest.raises(InvalidImageFormat):
            add(service, "shoes", "fashion", make_upload(b"data", "shoes.png"))

        assert catalog_store.list_items() == []
        assert [p.name for p in image_store.image_dir.iterdir()] == ["default.jpg"]


class TestImagePersistencePolicy:
    def test_best_effort_swallows_image_failure(
        self, catalog_store, image_store, jpeg_bytes, caplog
    ):
        service = ItemService(catalog_store, image_store, image_persistence="best-effort")

        with patch.object(image_store, "save", side_effect=StorageException("disk full")):
            with caplog.at_level(logging.ERROR, logger="catalog.services.item"):
                item = add(service, "shoes", "fashion", make_upload(jpeg_bytes, "shoes.jpg"))

        assert item.name == "shoes"
        assert len(catalog_store.list_items()) == 1
        assert "disk full" in caplog.text

    def test_strict_propagates_image_failure(self, catalog_store, image_store, jpeg_bytes):
        service = ItemService(catalog_store, image_store, image_persistence="strict")

        with patch.object(image_store, "save", side_effect=StorageException("disk full")):
            with pytest.raises(StorageException):
                add(service, "shoes", "fashion", make_upload(jpeg_bytes, "shoes.jpg"))

        # metadata is written first and is not rolled back
        assert len(catalog_store.list_items()) == 1

    def test_strict_wraps_os_errors(self, catalog_store, image_store, jpeg_bytes):
        service = ItemService(catalog_store, image_store, image_persistence="strict")

        with patch.object(image_store, "save", side_effect=PermissionError("denied")):
            with pytest.raises(StorageException) as exc_info:
                add(service, "shoes", "fashion", make_upload(jpeg_bytes, "shoes.jpg"))
        assert exc_info.value.status_code == 500
