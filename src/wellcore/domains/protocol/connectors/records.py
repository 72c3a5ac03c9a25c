"""Stored recommendation rows -> RecommendationBatch.

Hosts keep recommendation events as rows shaped like::

    {
        "id": "...",
        "source_type": "hormone_compass",
        "source_assessment_id": "...",
        "created_at": "2026-01-15T09:30:00Z",
        "protocol_data": {"immediate": [...], "foundation": [...], "optimization": [...]},
    }

This module maps those rows into the consolidator's input type.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from wellcore.domains.protocol.domain_logic.consolidator import consolidate
from wellcore.domains.protocol.domain_logic.protocol_models import (
    ConsolidatedProtocol,
    ItemTypePolicy,
    ProtocolItemInput,
    ProtocolShapeError,
    RecommendationBatch,
    Tier,
)

logger = logging.getLogger(__name__)

_TIER_KEYS = {tier.value for tier in Tier}


def batch_from_record(record: dict[str, Any]) -> RecommendationBatch:
    """Map one stored recommendation row into a RecommendationBatch.

    Raises:
        ProtocolShapeError: ``protocol_data`` is not a tier mapping, or an
            item inside it is malformed.
    """
    protocol_data = record.get("protocol_data")
    if protocol_data is None:
        protocol_data = {}
    if not isinstance(protocol_data, dict):
        raise ProtocolShapeError(
            f"protocol_data for record {record.get('id')!r} must be a mapping, "
            f"got {type(protocol_data).__name__}"
        )
    unknown = set(protocol_data) - _TIER_KEYS
    if unknown:
        raise ProtocolShapeError(
            f"protocol_data for record {record.get('id')!r} has unknown tiers: {sorted(unknown)}"
        )

    items: dict[Tier, list[ProtocolItemInput]] = {}
    for key, raw_items in protocol_data.items():
        tier = Tier(key)
        if raw_items is None:
            items[tier] = []
            continue
        if not isinstance(raw_items, list):
            raise ProtocolShapeError(
                f"Tier {key!r} of record {record.get('id')!r} must be a list"
            )
        items[tier] = [ProtocolItemInput.from_dict(raw, tier=tier) for raw in raw_items]

    return RecommendationBatch(
        id=str(record.get("id") or ""),
        source_type=str(record.get("source_type") or ""),
        source_assessment_id=record.get("source_assessment_id") or None,
        created_at=record.get("created_at"),
        items=items,
    )


def batches_from_records(records: Iterable[dict[str, Any]]) -> list[RecommendationBatch]:
    """Map many stored rows, preserving order."""
    return [batch_from_record(r) for r in records]


def consolidate_records(
    records: Iterable[dict[str, Any]],
    *,
    item_type_policy: ItemTypePolicy | None = None,
) -> ConsolidatedProtocol:
    """Consolidate stored rows directly."""
    batches = batches_from_records(records)
    logger.debug("Mapped %d recommendation records", len(batches))
    return consolidate(batches, item_type_policy=item_type_policy)
