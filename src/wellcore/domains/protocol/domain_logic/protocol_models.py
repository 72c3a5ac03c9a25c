"""Protocol models: tiers, item types, recommendation batches and consolidated items."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wellcore.core.config.settings import Settings

logger = logging.getLogger(__name__)


class ProtocolShapeError(ValueError):
    """Raised when recommendation data does not have the expected tier structure."""


# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

class Tier(str, Enum):
    """Priority bucket for a protocol item."""

    IMMEDIATE = "immediate"
    FOUNDATION = "foundation"
    OPTIMIZATION = "optimization"

    @classmethod
    def parse(cls, value: Tier | str) -> Tier:
        """Return the Tier for ``value`` or raise ProtocolShapeError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ProtocolShapeError(f"Unknown protocol tier: {value!r}") from None


TIER_ORDER = [Tier.IMMEDIATE, Tier.FOUNDATION, Tier.OPTIMIZATION]


class ItemType(str, Enum):
    HABIT = "habit"
    SUPPLEMENT = "supplement"
    EXERCISE = "exercise"
    DIET = "diet"
    THERAPY = "therapy"


@dataclass(frozen=True)
class ItemTypePolicy:
    """Maps the tier an item was recommended under to its item type.

    The default (immediate -> habit, everything else -> supplement) is a
    placeholder; hosts that know better pass their own mapping.
    """

    by_tier: dict[Tier, ItemType] = field(
        default_factory=lambda: {Tier.IMMEDIATE: ItemType.HABIT}
    )
    default: ItemType = ItemType.SUPPLEMENT

    def item_type_for(self, tier: Tier) -> ItemType:
        return self.by_tier.get(tier, self.default)

    @classmethod
    def from_settings(cls, settings: Settings) -> ItemTypePolicy:
        return cls(
            by_tier={Tier.IMMEDIATE: ItemType(settings.immediate_item_type)},
            default=ItemType(settings.default_item_type),
        )


DEFAULT_ITEM_TYPE_POLICY = ItemTypePolicy()


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

# Wire key -> attribute name for the optional item fields.
_OPTIONAL_ITEM_FIELDS = {
    "relevance": "relevance",
    "productKeywords": "product_keywords",
    "priority_tier": "priority_tier",
    "impact_weight": "impact_weight",
    "lis_pillar_contribution": "lis_pillar_contribution",
}
_KNOWN_ITEM_KEYS = {"name", "description", "category", *_OPTIONAL_ITEM_FIELDS}


@dataclass
class ProtocolItemInput:
    """A single recommendation as produced by an assessment."""

    name: str
    description: str
    category: Tier
    relevance: str | None = None
    product_keywords: list[str] | None = None
    priority_tier: Tier | None = None
    impact_weight: float | None = None
    lis_pillar_contribution: list[str] | None = None
    extra: dict[str, Any] = field(default_factory=dict)  # unrecognised keys, kept verbatim

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, tier: Tier | None = None) -> ProtocolItemInput:
        """Build an item from its wire shape.

        ``tier`` is the list the item was found in; it is used when the item
        carries no ``category`` of its own.
        """
        if not isinstance(data, dict):
            raise ProtocolShapeError(f"Protocol item must be a mapping, got {type(data).__name__}")
        name = data.get("name")
        if not isinstance(name, str):
            raise ProtocolShapeError(f"Protocol item is missing a name: {data!r}")

        raw_category = data.get("category")
        if raw_category is None:
            if tier is None:
                raise ProtocolShapeError(f"Protocol item {name!r} has no category")
            category = tier
        else:
            category = Tier.parse(raw_category)

        extra = {k: v for k, v in data.items() if k not in _KNOWN_ITEM_KEYS}
        priority_tier = _priority_tier(data.get("priority_tier"))
        if priority_tier is None and data.get("priority_tier") is not None:
            # Unrecognised priority is advisory only; keep it verbatim.
            logger.warning(
                "Ignoring unknown priority_tier %r on protocol item %r",
                data["priority_tier"],
                name,
            )
            extra["priority_tier"] = data["priority_tier"]

        return cls(
            name=name,
            description=data.get("description") or "",
            category=category,
            relevance=data.get("relevance"),
            product_keywords=_copy_list(data.get("productKeywords")),
            priority_tier=priority_tier,
            impact_weight=data.get("impact_weight"),
            lis_pillar_contribution=_copy_list(data.get("lis_pillar_contribution")),
            extra=extra,
        )

    def as_dict(self) -> dict[str, Any]:
        """Wire shape; optional fields that were never set are omitted."""
        out: dict[str, Any] = dict(self.extra)
        out["name"] = self.name
        out["description"] = self.description
        out["category"] = self.category.value
        for key, attr in _OPTIONAL_ITEM_FIELDS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            if isinstance(value, Tier):
                value = value.value
            elif isinstance(value, list):
                value = list(value)
            out[key] = value
        return out


@dataclass
class RecommendationBatch:
    """One timestamped set of recommendations from a single assessment event."""

    id: str
    source_type: str
    created_at: str | datetime | None = None
    source_assessment_id: str | None = None
    items: dict[Tier, list[ProtocolItemInput]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.items, dict):
            raise ProtocolShapeError(
                f"items of batch {self.id!r} must be a tier mapping, "
                f"got {type(self.items).__name__}"
            )
        checked: dict[Tier, list[ProtocolItemInput]] = {}
        for key, tier_items in self.items.items():
            tier = Tier.parse(key)
            if tier_items is None:
                tier_items = []
            elif not isinstance(tier_items, (list, tuple)):
                raise ProtocolShapeError(f"Tier {key!r} of batch {self.id!r} must be a list")
            checked[tier] = list(tier_items)
        self.items = checked

    def tier_items(self, tier: Tier) -> list[ProtocolItemInput]:
        return self.items.get(tier) or []

    @property
    def effective_assessment_id(self) -> str:
        """Assessment id used for provenance, falling back to the batch id."""
        return self.source_assessment_id or self.id


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProtocolItemSource:
    """Which assessment contributed a consolidated item."""

    source_type: str
    source_assessment_id: str
    source_date: str | None = None

    @property
    def identity(self) -> tuple[str, str]:
        return (self.source_type, self.source_assessment_id)

    def as_dict(self) -> dict[str, Any]:
        return {
            "sourceType": self.source_type,
            "sourceAssessmentId": self.source_assessment_id,
            "sourceDate": self.source_date,
        }


@dataclass
class ConsolidatedProtocolItem(ProtocolItemInput):
    """A deduplicated protocol item with its provenance."""

    item_type: ItemType = ItemType.SUPPLEMENT
    sources: list[ProtocolItemSource] = field(default_factory=list)
    reinforced: bool = False

    def has_source(self, source: ProtocolItemSource) -> bool:
        return any(s.identity == source.identity for s in self.sources)

    def as_dict(self) -> dict[str, Any]:
        out = super().as_dict()
        out["item_type"] = self.item_type.value
        out["sources"] = [s.as_dict() for s in self.sources]
        out["reinforced"] = self.reinforced
        return out


@dataclass
class ConsolidatedProtocol:
    """Consolidated items grouped by tier, each list in first-seen order."""

    immediate: list[ConsolidatedProtocolItem] = field(default_factory=list)
    foundation: list[ConsolidatedProtocolItem] = field(default_factory=list)
    optimization: list[ConsolidatedProtocolItem] = field(default_factory=list)

    def tier(self, tier: Tier) -> list[ConsolidatedProtocolItem]:
        return getattr(self, tier.value)

    def all_items(self) -> list[ConsolidatedProtocolItem]:
        return [item for tier in TIER_ORDER for item in self.tier(tier)]

    def as_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {tier.value: [item.as_dict() for item in self.tier(tier)] for tier in TIER_ORDER}


def _copy_list(value: Any) -> list | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _priority_tier(value: Any) -> Tier | None:
    if value is None:
        return None
    try:
        return Tier.parse(value)
    except ProtocolShapeError:
        return None
