# catalog/services/item.py
import logging

from fastapi import UploadFile

from catalog.core.decorator import StorageException, ValidationException
from catalog.schemas.item import ItemResponse
from catalog.services.catalog import CatalogStore
from catalog.utils.file_upload import ImageStore

logger = logging.getLogger(__name__)


class ItemService:
    """Coordinates the catalog store and the image store for item uploads."""

    def __init__(
        self,
        catalog: CatalogStore,
        images: ImageStore,
        image_persistence: str = "best-effort",
    ):
        self.catalog = catalog
        self.images = images
        self.image_persistence = image_persistence

    async def add_item(
        self, name: str, category: str, image: UploadFile
    ) -> ItemResponse:
        """
        Store item metadata, then the uploaded image.

        With ``best-effort`` image persistence a failed image write is
        logged and the item is still reported as stored; with ``strict``
        the failure is raised as StorageException.
        """
        if image is None or not image.filename:
            raise ValidationException("image file is required")

        logger.info(f"Receive item: {name}")
        logger.info(f"Receive category: {category}")
        logger.info(f"Receive image: {image.filename}")

        item = self.catalog.add(name, category, image.filename)

        try:
            contents = await image.read()
            self.images.save(contents, image.filename)
        except (StorageException, OSError) as e:
            if self.image_persistence == "strict":
                logger.error(f"Failed to save image for item {item.id}: {e}")
                if isinstance(e, StorageException):
                    raise
                raise StorageException(f"Error saving image: {e}") from e
            logger.error(f"Cannot save image for item {item.id} (ignored): {e}")

        return item
