"""Unit tests for adapting a consolidated protocol to today's plan modifiers."""

from __future__ import annotations

from wellcore.domains.checkin.domain_logic.checkin_models import PlanModifiers
from wellcore.domains.protocol.domain_logic.adaptation import (
    adapt_protocol,
    is_high_intensity,
    matches_focus,
    suppressed_items,
)
from wellcore.domains.protocol.domain_logic.protocol_models import (
    ConsolidatedProtocol,
    ConsolidatedProtocolItem,
    ItemType,
    ProtocolItemSource,
    Tier,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _item(name, tier=Tier.IMMEDIATE, *, item_type=ItemType.HABIT, sources=1):
    return ConsolidatedProtocolItem(
        name=name,
        description="",
        category=tier,
        item_type=item_type,
        sources=[ProtocolItemSource("quiz", f"a{i}") for i in range(sources)],
        reinforced=sources >= 2,
    )


def _protocol(*items):
    protocol = ConsolidatedProtocol()
    for item in items:
        protocol.tier(item.category).append(item)
    return protocol


def _names(items):
    return [i.name for i in items]


# ===========================================================================
# Keyword helpers
# ===========================================================================

class TestKeywords:
    def test_high_intensity_names(self):
        assert is_high_intensity("HIIT Intervals")
        assert is_high_intensity("Box jumps")
        assert is_high_intensity("Morning run")
        assert not is_high_intensity("Gentle yoga")

    def test_focus_matching(self):
        assert matches_focus("Sleep hygiene", "recovery")
        assert matches_focus("Box breathing", "stress_support")
        assert not matches_focus("Box breathing", "recovery")
        assert not matches_focus("Box breathing", None)


# ===========================================================================
# Suppression
# ===========================================================================

class TestSuppression:
    def test_no_modifiers_keeps_everything(self):
        protocol = _protocol(_item("HIIT"), _item("Walk"))
        assert _names(adapt_protocol(protocol).immediate) == ["HIIT", "Walk"]

    def test_lower_intensity_drops_high_intensity(self):
        protocol = _protocol(_item("Sprint session"), _item("Walk"))
        adapted = adapt_protocol(protocol, PlanModifiers(intensity_modifier=-1))
        assert _names(adapted.immediate) == ["Walk"]

    def test_avoid_impact_drops_exercise_items(self):
        protocol = _protocol(
            _item("Mobility flow", item_type=ItemType.EXERCISE),
            _item("Walk"),
        )
        adapted = adapt_protocol(protocol, {"exercise_constraint": "avoid_impact"})
        assert _names(adapted.immediate) == ["Walk"]

    def test_neutral_intensity_keeps_high_intensity(self):
        protocol = _protocol(_item("Burpees"))
        adapted = adapt_protocol(protocol, PlanModifiers())
        assert _names(adapted.immediate) == ["Burpees"]

    def test_suppressed_items_lists_drops(self):
        protocol = _protocol(_item("Jump rope"), _item("Zinc", Tier.FOUNDATION, item_type=ItemType.SUPPLEMENT))
        dropped = suppressed_items(protocol, PlanModifiers(intensity_modifier=-1))
        assert _names(dropped) == ["Jump rope"]

    def test_input_protocol_untouched(self):
        protocol = _protocol(_item("HIIT"), _item("Walk"))
        adapt_protocol(protocol, PlanModifiers(intensity_modifier=-1))
        assert _names(protocol.immediate) == ["HIIT", "Walk"]


# ===========================================================================
# Ordering
# ===========================================================================

class TestOrdering:
    def test_reinforced_first(self):
        protocol = _protocol(_item("Walk"), _item("Stretch", sources=2))
        assert _names(adapt_protocol(protocol).immediate) == ["Stretch", "Walk"]

    def test_focus_match_after_reinforcement(self):
        protocol = _protocol(
            _item("Walk"),
            _item("Box breathing"),
            _item("Journal", sources=2),
        )
        adapted = adapt_protocol(protocol, PlanModifiers(focus="stress_support"))
        assert _names(adapted.immediate) == ["Journal", "Box breathing", "Walk"]

    def test_ties_keep_first_seen_order(self):
        protocol = _protocol(_item("C"), _item("A"), _item("B"))
        assert _names(adapt_protocol(protocol).immediate) == ["C", "A", "B"]

    def test_tiers_stay_separate(self):
        protocol = _protocol(
            _item("Rest day", Tier.FOUNDATION, item_type=ItemType.SUPPLEMENT),
            _item("Walk"),
        )
        adapted = adapt_protocol(protocol, PlanModifiers(focus="recovery"))
        assert _names(adapted.immediate) == ["Walk"]
        assert _names(adapted.foundation) == ["Rest day"]
