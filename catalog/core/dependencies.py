from fastapi import Depends, Request

from catalog.core.config import Settings
from catalog.services.catalog import CatalogStore
from catalog.services.item import ItemService
from catalog.utils.file_upload import ImageStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_catalog_store(request: Request) -> CatalogStore:
    """Return the catalog store built once at application startup."""
    return request.app.state.catalog_store


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


def get_item_service(
    catalog: CatalogStore = Depends(get_catalog_store),
    images: ImageStore = Depends(get_image_store),
    settings: Settings = Depends(get_settings),
) -> ItemService:
    return ItemService(catalog, images, settings.image_persistence)
