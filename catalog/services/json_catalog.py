# catalog/services/json_catalog.py
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List

from catalog.core.decorator import (
    NotFoundException,
    StorageException,
    storage_exception,
)
from catalog.schemas.item import CatalogDocument, ItemRecord, ItemResponse
from catalog.services.catalog import CatalogStore, like_pattern

logger = logging.getLogger(__name__)


class JsonCatalogStore(CatalogStore):
    """Flat-file backend: the whole catalog is one JSON document."""

    backend_name = "json"

    def __init__(self, items_file: str, allowed_extensions=None):
        super().__init__(allowed_extensions)
        self.items_file = Path(items_file)

    # ==================== Document I/O ====================

    def _read_document(self) -> CatalogDocument:
        if not self.items_file.exists():
            return CatalogDocument()
        with self.items_file.open("r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise StorageException("Catalog document is not a JSON object")
        return CatalogDocument.model_validate(raw)

    def _write_document(self, document: CatalogDocument) -> None:
        """Write to a temp file in the same directory, then rename over the target."""
        directory = self.items_file.parent
        directory.mkdir(parents=True, exist_ok=True)

        payload = document.model_dump(by_alias=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=directory, prefix=f".{self.items_file.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.items_file)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    @staticmethod
    def _with_position(records: List[ItemRecord]) -> List[ItemResponse]:
        return [
            ItemResponse(id=index, **record.model_dump())
            for index, record in enumerate(records)
        ]

    # ==================== Operations ====================

    @storage_exception
    def add(
        self, name: str, category: str, image_original_filename: str
    ) -> ItemResponse:
        image_file_name = self._prepare(name, category, image_original_filename)

        document = self._read_document()
        record = ItemRecord(
            name=name, category=category or "", image_file_name=image_file_name
        )
        document.items.append(record)
        self._write_document(document)

        item_id = len(document.items) - 1
        logger.info(f"Item stored at position {item_id}: {name}")
        return ItemResponse(id=item_id, **record.model_dump())

    @storage_exception
    def list_items(self) -> List[ItemResponse]:
        return self._with_position(self._read_document().items)

    @storage_exception
    def get_by_id(self, item_id: int) -> ItemResponse:
        records = self._read_document().items
        if item_id < 0 or item_id >= len(records):
            raise NotFoundException(f"Item not found: {item_id}")
        return ItemResponse(id=item_id, **records[item_id].model_dump())

    @storage_exception
    def search(self, keyword: str) -> List[ItemResponse]:
        pattern = like_pattern(keyword or "")
        return [
            item
            for item in self.list_items()
            if pattern.fullmatch(item.name)
        ]
