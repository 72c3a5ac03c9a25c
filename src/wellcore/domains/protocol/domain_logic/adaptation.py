"""Apply the day's plan modifiers to a consolidated protocol.

Items that clash with today's constraints (high-intensity work on a low-
intensity day, impact exercise with an injury) are suppressed. Survivors are
ordered reinforced-first, then by whether they match today's focus.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from wellcore.domains.protocol.domain_logic.protocol_models import (
    TIER_ORDER,
    ConsolidatedProtocol,
    ConsolidatedProtocolItem,
    ItemType,
)

if TYPE_CHECKING:
    from wellcore.domains.checkin.domain_logic.checkin_models import PlanModifiers

logger = logging.getLogger(__name__)

HIGH_INTENSITY_KEYWORDS = ["hiit", "sprint", "burpee", "plyo", "impact", "run", "jump"]

FOCUS_KEYWORDS: dict[str, list[str]] = {
    "recovery": ["recovery", "sleep", "rest", "restore"],
    "stress_support": ["breath", "stress", "calm", "relax"],
}


def _modifier(modifiers: PlanModifiers | dict[str, Any] | None, name: str) -> Any:
    if modifiers is None:
        return None
    if isinstance(modifiers, dict):
        return modifiers.get(name)
    return getattr(modifiers, name, None)


def is_high_intensity(name: str) -> bool:
    value = name.lower()
    return any(keyword in value for keyword in HIGH_INTENSITY_KEYWORDS)


def matches_focus(name: str, focus: str | None) -> bool:
    keywords = FOCUS_KEYWORDS.get(focus or "", [])
    value = name.lower()
    return any(keyword in value for keyword in keywords)


def should_suppress(
    item: ConsolidatedProtocolItem,
    modifiers: PlanModifiers | dict[str, Any] | None,
) -> bool:
    """Whether ``item`` conflicts with today's exercise constraint or intensity."""
    if _modifier(modifiers, "exercise_constraint") == "avoid_impact" and (
        item.item_type == ItemType.EXERCISE or is_high_intensity(item.name)
    ):
        return True
    intensity = _modifier(modifiers, "intensity_modifier") or 0
    return intensity < 0 and is_high_intensity(item.name)


def suppressed_items(
    protocol: ConsolidatedProtocol,
    modifiers: PlanModifiers | dict[str, Any] | None,
) -> list[ConsolidatedProtocolItem]:
    """Items ``adapt_protocol`` would drop, in tier order."""
    return [item for item in protocol.all_items() if should_suppress(item, modifiers)]


def adapt_protocol(
    protocol: ConsolidatedProtocol,
    modifiers: PlanModifiers | dict[str, Any] | None = None,
) -> ConsolidatedProtocol:
    """Return a new protocol filtered and reordered for today.

    The input protocol is left untouched; kept items are shared, not copied.
    """
    focus = _modifier(modifiers, "focus")
    adapted = ConsolidatedProtocol()
    dropped = 0
    for tier in TIER_ORDER:
        kept = []
        for item in protocol.tier(tier):
            if should_suppress(item, modifiers):
                dropped += 1
            else:
                kept.append(item)
        # Stable sort: ties keep first-seen order.
        kept.sort(key=lambda i: (not i.reinforced, not matches_focus(i.name, focus)))
        adapted.tier(tier).extend(kept)

    if dropped:
        logger.debug("Suppressed %d protocol items for today's modifiers", dropped)
    return adapted
