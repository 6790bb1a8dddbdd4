# catalog/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends

from catalog.core.dependencies import get_catalog_store
from catalog.schemas.category import CategoryResponse
from catalog.services.catalog import CatalogStore

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryResponse])
def list_categories(catalog: CatalogStore = Depends(get_catalog_store)):
    """List categories registered by item uploads (relational backend only)."""
    return catalog.list_categories()
