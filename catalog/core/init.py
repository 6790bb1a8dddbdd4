"""
Application initialization module
Builds the stores once at startup and attaches them to the application state
"""

import logging

from fastapi import FastAPI

from catalog.core.config import Settings
from catalog.services.catalog import build_catalog_store
from catalog.utils.file_upload import ImageStore

logger = logging.getLogger(__name__)


def init_image_store(settings: Settings) -> ImageStore:
    """
    Create the image store and make sure the default image exists.

    Args:
        settings: Application settings
    """
    image_store = ImageStore(
        image_dir=settings.image_dir,
        default_image=settings.default_image,
        allowed_extensions=settings.allowed_image_extensions,
    )
    default_path = image_store.ensure_default_image()
    logger.info(f"Image directory: {image_store.image_dir.absolute()}")
    logger.info(f"  - Default image: {default_path.name}")
    logger.info(f"  - Persistence: {settings.image_persistence}")
    return image_store


def initialize_application(app: FastAPI, settings: Settings) -> None:
    """
    Run all application initialization tasks.

    Args:
        app: The FastAPI application whose state receives the stores
        settings: Application settings
    """
    logger.info("🚀 Starting application initialization...")

    app.state.settings = settings
    app.state.image_store = init_image_store(settings)
    app.state.catalog_store = build_catalog_store(settings)

    logger.info("✅ Application initialization completed!")


def shutdown_application(app: FastAPI) -> None:
    catalog_store = getattr(app.state, "catalog_store", None)
    if catalog_store is not None:
        catalog_store.close()
