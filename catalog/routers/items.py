# catalog/routers/items.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from catalog.core.dependencies import get_catalog_store, get_item_service
from catalog.schemas.item import ItemListResponse, ItemResponse, MessageResponse
from catalog.services.catalog import CatalogStore
from catalog.services.item import ItemService

router = APIRouter(
    tags=["Items"],
    responses={404: {"description": "Not found"}},
)


# ==================== Item Endpoints ====================


@router.get("/items", response_model=ItemListResponse)
def list_items(catalog: CatalogStore = Depends(get_catalog_store)):
    """List every item in the catalog."""
    return ItemListResponse(items=catalog.list_items())


@router.get("/items/{item_id}", response_model=ItemResponse)
def get_item(item_id: int, catalog: CatalogStore = Depends(get_catalog_store)):
    """
    Get one item.
    With the flat-file backend the id is the item's position in /items.
    """
    return catalog.get_by_id(item_id)


@router.post("/items", response_model=MessageResponse)
async def add_item(
    name: str = Form(""),
    category: str = Form(""),
    image: Optional[UploadFile] = File(None, description="Item photo (.jpg)"),
    service: ItemService = Depends(get_item_service),
):
    """Add an item from a multipart form with name, category and image."""
    item = await service.add_item(name, category, image)
    return MessageResponse(message=f"item received: {item.name}")


@router.get("/search", response_model=List[ItemResponse])
def search_items(
    keyword: str = Query("", description="Substring matched against item names"),
    catalog: CatalogStore = Depends(get_catalog_store),
):
    """Search items by name (SQL LIKE semantics)."""
    return catalog.search(keyword)
