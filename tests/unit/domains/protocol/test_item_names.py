"""Unit tests for item name keys and duplicate filtering."""

from __future__ import annotations

import pytest

from wellcore.domains.protocol.domain_logic.item_names import (
    filter_duplicate_items,
    normalize_item_name,
    protocol_item_key,
)
from wellcore.domains.protocol.domain_logic.protocol_models import ItemType


class TestNormalizeItemName:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Magnesium Glycinate", "magnesium glycinate"),
            ("  magnesium   GLYCINATE ", "magnesium glycinate"),
            ("Vitamin\tD3\n", "vitamin d3"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_normalizes(self, raw, expected):
        assert normalize_item_name(raw) == expected

    def test_deterministic(self):
        assert normalize_item_name("Omega 3") == normalize_item_name("Omega 3")


class TestProtocolItemKey:
    def test_key_includes_type(self):
        assert protocol_item_key("Zinc ", ItemType.SUPPLEMENT) == "zinc|supplement"

    def test_accepts_plain_string_type(self):
        assert protocol_item_key("Walk", "habit") == "walk|habit"


class TestFilterDuplicateItems:
    def test_empty_input(self):
        assert filter_duplicate_items([], {"zinc|supplement"}) == ([], [])

    def test_existing_keys_are_duplicates(self):
        items = [
            {"name": "ZINC", "item_type": "supplement"},
            {"name": "Zinc", "item_type": "habit"},
        ]
        unique, duplicates = filter_duplicate_items(items, {"zinc|supplement"})
        assert unique == [items[1]]
        assert duplicates == [items[0]]

    def test_duplicates_within_batch(self):
        items = [
            {"name": "Fish Oil", "item_type": "supplement"},
            {"name": "fish  oil", "item_type": "supplement"},
        ]
        unique, duplicates = filter_duplicate_items(items)
        assert unique == [items[0]]
        assert duplicates == [items[1]]

    def test_accepts_objects(self):
        class _Item:
            def __init__(self, name, item_type):
                self.name = name
                self.item_type = item_type

        a = _Item("Sauna", ItemType.THERAPY)
        unique, duplicates = filter_duplicate_items([a], ["sauna|therapy"])
        assert unique == []
        assert duplicates == [a]
