"""
Models package initialization
Import all models so they register on the shared metadata
"""

from .category import Category
from .item import Item

__all__ = [
    "Category",
    "Item",
]
