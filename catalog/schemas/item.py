# catalog/schemas/item.py
from typing import List

from pydantic import BaseModel, ConfigDict, Field

# ==================== Item Schemas ====================


class ItemBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    category: str = ""
    image_file_name: str = Field(..., alias="imageFileName")


class ItemRecord(ItemBase):
    """One entry of the flat-file catalog document (ids are positional)."""


class ItemResponse(ItemBase):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int


class ItemListResponse(BaseModel):
    items: List[ItemResponse]


class CatalogDocument(BaseModel):
    """Shape of the flat-file backend: {"items": [...]}."""

    items: List[ItemRecord] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str
