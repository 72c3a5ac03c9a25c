"""Item name matching keys and duplicate filtering."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from wellcore.domains.protocol.domain_logic.protocol_models import ItemType

T = TypeVar("T")

NameNormalizer = Callable[[str], str]

_WHITESPACE = re.compile(r"\s+")


def normalize_item_name(name: str | None) -> str:
    """Canonical matching key for a display name.

    Case-folded, trimmed, internal whitespace runs collapsed to one space.
    """
    if not name:
        return ""
    return _WHITESPACE.sub(" ", name.casefold().strip())


def protocol_item_key(
    name: str,
    item_type: ItemType | str,
    *,
    normalizer: NameNormalizer = normalize_item_name,
) -> str:
    """Dedup key: ``"<normalized name>|<item type>"``."""
    type_value = item_type.value if isinstance(item_type, ItemType) else str(item_type)
    return f"{normalizer(name)}|{type_value}"


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def filter_duplicate_items(
    items: Iterable[T],
    existing_keys: Iterable[str] = (),
    *,
    normalizer: NameNormalizer = normalize_item_name,
) -> tuple[list[T], list[T]]:
    """Split ``items`` into (unique, duplicates) against keys already held.

    Items may be objects or dicts exposing ``name`` and ``item_type``. Keys
    accepted from ``items`` count too, so a batch never adds the same key twice.
    """
    seen = set(existing_keys)
    unique: list[T] = []
    duplicates: list[T] = []
    for item in items:
        key = protocol_item_key(
            _field(item, "name") or "", _field(item, "item_type") or "", normalizer=normalizer
        )
        if key in seen:
            duplicates.append(item)
        else:
            unique.append(item)
            seen.add(key)
    return unique, duplicates
