"""Deterministic protocol consolidation: recommendation batches -> one protocol.

Batches produced by different assessments are merged in ascending creation
order. Items that normalize to the same name and item type collapse into a
single entry whose ``sources`` record every distinct assessment that produced
it. The earliest batch's field values win; later batches only add provenance.

Pure: inputs are never mutated and no state is kept between calls.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from dataclasses import fields
from datetime import datetime, timezone

from wellcore.domains.protocol.domain_logic.item_names import (
    NameNormalizer,
    normalize_item_name,
)
from wellcore.domains.protocol.domain_logic.protocol_models import (
    DEFAULT_ITEM_TYPE_POLICY,
    TIER_ORDER,
    ConsolidatedProtocol,
    ConsolidatedProtocolItem,
    ItemType,
    ItemTypePolicy,
    ProtocolItemInput,
    ProtocolItemSource,
    RecommendationBatch,
    Tier,
)

logger = logging.getLogger(__name__)

_INPUT_FIELDS = [f.name for f in fields(ProtocolItemInput)]


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

def _parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse a batch timestamp into an aware datetime (naive values are UTC)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            logger.warning("Ignoring unparseable batch timestamp: %r", value)
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_batches(batches: Iterable[RecommendationBatch]) -> list[RecommendationBatch]:
    """Stable ascending sort by ``created_at``."""
    dated: list[tuple[datetime, RecommendationBatch]] = []
    undated: list[RecommendationBatch] = []
    for batch in batches:
        parsed = _parse_timestamp(batch.created_at)
        if parsed is not None:
            dated.append((parsed, batch))
        else:
            undated.append(batch)
    dated.sort(key=lambda pair: pair[0])
    # Undated batches go after every dated one.
    return [batch for _, batch in dated] + undated


def _source_date(value: str | datetime | None) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


# ---------------------------------------------------------------------------
# Consolidation
# ---------------------------------------------------------------------------

def _new_item(
    item: ProtocolItemInput,
    item_type: ItemType,
    source: ProtocolItemSource,
) -> ConsolidatedProtocolItem:
    copied = {name: copy.deepcopy(getattr(item, name)) for name in _INPUT_FIELDS}
    copied["category"] = Tier.parse(item.category)
    return ConsolidatedProtocolItem(**copied, item_type=item_type, sources=[source])


def consolidate(
    batches: Iterable[RecommendationBatch],
    *,
    item_type_policy: ItemTypePolicy | None = None,
    name_normalizer: NameNormalizer = normalize_item_name,
) -> ConsolidatedProtocol:
    """Merge recommendation batches into a single deduplicated protocol.

    Args:
        batches: Recommendation batches in any order.
        item_type_policy: Tier -> item type mapping; defaults to
            immediate -> habit, everything else -> supplement.
        name_normalizer: Maps a display name to its matching key.

    Returns:
        ConsolidatedProtocol whose tiers follow each item's original
        ``category``, items in the order their key was first seen.
    """
    policy = item_type_policy or DEFAULT_ITEM_TYPE_POLICY
    by_key: dict[tuple[str, ItemType], ConsolidatedProtocolItem] = {}

    ordered = sort_batches(batches)
    seen_inputs = 0
    for batch in ordered:
        source = ProtocolItemSource(
            source_type=batch.source_type,
            source_assessment_id=batch.effective_assessment_id,
            source_date=_source_date(batch.created_at),
        )
        for tier in TIER_ORDER:
            for item in batch.tier_items(tier):
                seen_inputs += 1
                item_type = policy.item_type_for(Tier.parse(item.category))
                key = (name_normalizer(item.name), item_type)

                existing = by_key.get(key)
                if existing is None:
                    by_key[key] = _new_item(item, item_type, source)
                elif not existing.has_source(source):
                    existing.sources.append(source)

    protocol = ConsolidatedProtocol()
    for merged in by_key.values():
        merged.reinforced = len(merged.sources) >= 2
        protocol.tier(Tier.parse(merged.category)).append(merged)

    logger.debug(
        "Consolidated %d batches (%d items) into %d protocol items",
        len(ordered),
        seen_inputs,
        len(by_key),
    )
    return protocol
