"""Behavior shared by both catalog backends."""

import pytest

from catalog.core.decorator import (
    InvalidImageFormat,
    NotFoundException,
    ValidationException,
)
from conftest import hashed_name


class TestAdd:
    def test_add_then_list_contains_hashed_image_name(self, catalog_store):
        catalog_store.add("shoes", "fashion", "shoes.jpg")

        items = catalog_store.list_items()
        assert len(items) == 1
        assert items[0].name == "shoes"
        assert items[0].category == "fashion"
        assert items[0].image_file_name == hashed_name("shoes.jpg")

    def test_add_returns_item_with_id(self, catalog_store):
        item = catalog_store.add("shoes", "fashion", "shoes.jpg")
        assert catalog_store.get_by_id(item.id) == item

    @pytest.mark.parametrize("filename", ["shoes.png", "shoes.JPG", "shoes"])
    def test_add_rejects_non_jpg_without_mutation(self, catalog_store, filename):
        catalog_store.add("hat", "fashion", "hat.jpg")

        with pytest.raises(InvalidImageFormat):
            catalog_store.add("shoes", "fashion", filename)

        assert len(catalog_store.list_items()) == 1

    def test_add_requires_name(self, catalog_store):
        with pytest.raises(ValidationException):
            catalog_store.add("", "fashion", "shoes.jpg")
        assert catalog_store.list_items() == []

    def test_list_preserves_insertion_order(self, catalog_store):
        for name in ["a", "b", "c"]:
            catalog_store.add(name, "", f"{name}.jpg")

        assert [item.name for item in catalog_store.list_items()] == ["a", "b", "c"]

    def test_ids_are_unique(self, catalog_store):
        for name in ["a", "b", "c"]:
            catalog_store.add(name, "", f"{name}.jpg")

        ids = [item.id for item in catalog_store.list_items()]
        assert len(set(ids)) == 3


class TestGetById:
    def test_unknown_id_raises_not_found(self, catalog_store):
        catalog_store.add("shoes", "fashion", "shoes.jpg")

        with pytest.raises(NotFoundException) as exc_info:
            catalog_store.get_by_id(999)
        assert exc_info.value.status_code == 404

    def test_empty_catalog_raises_not_found(self, catalog_store):
        with pytest.raises(NotFoundException):
            catalog_store.get_by_id(0)


class TestSearch:
    @pytest.fixture(autouse=True)
    def populate(self, catalog_store):
        catalog_store.add("red shoes", "fashion", "red.jpg")
        catalog_store.add("blue hat", "fashion", "blue.jpg")
        catalog_store.add("100% cotton shirt", "fashion", "shirt.jpg")

    def test_empty_keyword_returns_everything(self, catalog_store):
        assert len(catalog_store.search("")) == 3

    def test_substring_match(self, catalog_store):
        assert [i.name for i in catalog_store.search("hat")] == ["blue hat"]

    def test_match_ignores_ascii_case(self, catalog_store):
        assert [i.name for i in catalog_store.search("SHOES")] == ["red shoes"]

    def test_no_match_returns_empty_list(self, catalog_store):
        assert catalog_store.search("nonexistent-xyz") == []

    def test_percent_in_keyword_is_a_wildcard(self, catalog_store):
        names = {i.name for i in catalog_store.search("e%s")}
        assert names == {"red shoes"}
        assert "100% cotton shirt" in {i.name for i in catalog_store.search("0%c")}

    def test_underscore_in_keyword_matches_one_character(self, catalog_store):
        assert [i.name for i in catalog_store.search("h_t")] == ["blue hat"]
