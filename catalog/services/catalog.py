# catalog/services/catalog.py
import abc
import logging
import re
from typing import List

from catalog.core.config import Settings
from catalog.core.decorator import ValidationException
from catalog.schemas.category import CategoryResponse
from catalog.schemas.item import ItemResponse
from catalog.utils.file_upload import ALLOWED_IMAGE_EXTENSIONS, content_address

logger = logging.getLogger(__name__)


class CatalogStore(abc.ABC):
    """
    Persistence of catalog items.

    Item ids are backend specific: the relational backend returns the
    primary key, the flat-file backend returns the item's zero-based
    position in the current listing. Positional ids shift if the
    document is edited out of band and are meaningless to the other
    backend.
    """

    backend_name = "abstract"

    def __init__(self, allowed_extensions=None):
        self.allowed_extensions = set(allowed_extensions or ALLOWED_IMAGE_EXTENSIONS)

    def _prepare(self, name: str, category: str, image_original_filename: str) -> str:
        """Validate an add request and return the image file name to store."""
        if not name:
            raise ValidationException("name is required")
        if not image_original_filename:
            raise ValidationException("image filename is required")
        return content_address(image_original_filename, self.allowed_extensions)

    @abc.abstractmethod
    def add(
        self, name: str, category: str, image_original_filename: str
    ) -> ItemResponse:
        """Append an item and return it with its assigned id."""

    @abc.abstractmethod
    def list_items(self) -> List[ItemResponse]:
        """Return every item in storage order."""

    @abc.abstractmethod
    def get_by_id(self, item_id: int) -> ItemResponse:
        """Return one item or raise NotFoundException."""

    @abc.abstractmethod
    def search(self, keyword: str) -> List[ItemResponse]:
        """Return items whose name matches ``%keyword%`` under LIKE rules."""

    def list_categories(self) -> List[CategoryResponse]:
        return []

    def close(self) -> None:
        pass


def like_pattern(keyword: str) -> "re.Pattern[str]":
    """
    Compile ``%keyword%`` with SQL LIKE rules.

    ``%`` and ``_`` inside the keyword are wildcards, not literals, and
    matching is case-insensitive, mirroring SQLite's default LIKE.
    """
    parts = []
    for char in keyword:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile(".*" + "".join(parts) + ".*", re.IGNORECASE | re.DOTALL)


def build_catalog_store(settings: Settings) -> CatalogStore:
    """Construct the catalog store selected by ``settings.catalog_backend``."""
    if settings.catalog_backend == "sqlite":
        from catalog.services.sql_catalog import SqlCatalogStore

        store = SqlCatalogStore(
            settings.database_path,
            allowed_extensions=settings.allowed_image_extensions,
            echo=settings.debug,
        )
    else:
        from catalog.services.json_catalog import JsonCatalogStore

        store = JsonCatalogStore(
            settings.items_file,
            allowed_extensions=settings.allowed_image_extensions,
        )

    logger.info(f"Catalog backend: {store.backend_name}")
    return store
