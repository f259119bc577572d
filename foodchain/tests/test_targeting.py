"""
Tests for the targeting rules.

Tests:
- Ability targeting (Lure, Invisible, Acuity, Hidden)
- The Lure must-target filter
- Candidate pools built from the context
"""

import pytest

from ..engine_core.keywords import Keyword
from ..engine_core.primitives.common import mixed_creature_targets
from ..engine_core.state import CardType
from ..engine_core.targeting import (
    can_target_with_ability,
    filter_for_lure,
    targetable_enemies,
    targetable_friendlies,
)
from .conftest import make_card, place


class TestCanTargetWithAbility:
    """Tests for the per-creature visibility rule."""

    def test_no_target(self):
        """Nothing to target is never targetable."""
        assert can_target_with_ability(None, make_card()) is False

    def test_plain_creature(self):
        assert can_target_with_ability(make_card(), make_card("Caster")) is True

    def test_invisible_needs_acuity(self):
        """Invisible creatures only fall to casters with Acuity."""
        ghost = make_card("Ghost", keywords=[Keyword.INVISIBLE.value])
        seer = make_card("Seer", keywords=[Keyword.ACUITY.value])
        assert can_target_with_ability(ghost, make_card("Caster")) is False
        assert can_target_with_ability(ghost, None) is False
        assert can_target_with_ability(ghost, seer) is True

    def test_lure_overrides_invisible(self):
        """Lure wins over Invisible."""
        decoy = make_card("Decoy", keywords=[Keyword.INVISIBLE.value, Keyword.LURE.value])
        assert can_target_with_ability(decoy, make_card("Caster")) is True

    def test_hidden_does_not_block_abilities(self):
        """Hidden only protects from attacks."""
        hider = make_card("Hider", keywords=[Keyword.HIDDEN.value])
        assert can_target_with_ability(hider, make_card("Caster")) is True

    def test_dry_dropped_predator_loses_invisible(self):
        """Suppressed keywords do not hide a creature."""
        shark = make_card(
            "Shark",
            card_type=CardType.PREDATOR.value,
            keywords=[Keyword.INVISIBLE.value],
            dry_dropped=True,
        )
        assert can_target_with_ability(shark, make_card("Caster")) is True

    @pytest.mark.parametrize("target_keywords", [
        [],
        [Keyword.LURE.value],
        [Keyword.INVISIBLE.value],
        [Keyword.INVISIBLE.value, Keyword.LURE.value],
    ])
    @pytest.mark.parametrize("caster_keywords", [[], [Keyword.ACUITY.value]])
    def test_rule_table(self, target_keywords, caster_keywords):
        """Targetable iff Lure, or not Invisible, or the caster has Acuity."""
        target = make_card("Target", keywords=target_keywords)
        caster = make_card("Caster", keywords=caster_keywords)
        expected = (
            Keyword.LURE.value in target_keywords
            or Keyword.INVISIBLE.value not in target_keywords
            or Keyword.ACUITY.value in caster_keywords
        )
        assert can_target_with_ability(target, caster) is expected


class TestFilterForLure:
    """Tests for the must-target filter."""

    def test_keeps_only_lure(self):
        plain = make_card("Plain")
        lure_a = make_card("Lure A", keywords=[Keyword.LURE.value])
        lure_b = make_card("Lure B", keywords=[Keyword.LURE.value])
        assert filter_for_lure([plain, lure_a, lure_b]) == [lure_a, lure_b]

    def test_without_lure_returns_all(self):
        cards = [make_card("A"), make_card("B")]
        assert filter_for_lure(cards) == cards

    def test_empty(self):
        assert filter_for_lure([]) == []


class TestCandidatePools:
    """Tests for context-driven candidate pools."""

    def test_enemies_skip_invisible_and_empty_slots(self, context, rival):
        visible = make_card("Visible")
        ghost = make_card("Ghost", keywords=[Keyword.INVISIBLE.value])
        rival.field[0] = None
        rival.field[1] = visible
        rival.field[2] = ghost
        assert targetable_enemies(context) == [visible]

    def test_enemies_with_acuity_caster(self, make_context, rival):
        ghost = make_card("Ghost", keywords=[Keyword.INVISIBLE.value])
        place(rival, ghost)
        ctx = make_context(creature=make_card("Seer", keywords=[Keyword.ACUITY.value]))
        assert targetable_enemies(ctx) == [ghost]

    def test_enemies_lure_must_be_targeted(self, context, rival):
        plain = make_card("Plain")
        decoy = make_card("Decoy", keywords=[Keyword.LURE.value])
        place(rival, plain, decoy)
        assert targetable_enemies(context) == [decoy]

    def test_enemies_predicate(self, context, rival):
        prey = make_card("Prey")
        predator = make_card("Predator", card_type=CardType.PREDATOR.value)
        place(rival, prey, predator)
        assert targetable_enemies(context, lambda c: c.type == "Predator") == [predator]

    def test_no_opponent(self, make_context):
        assert targetable_enemies(make_context(opponent=None)) == []

    def test_friendlies(self, context, me):
        a, b = make_card("A"), make_card("B")
        place(me, a, b)
        assert targetable_friendlies(context) == [a, b]

    def test_mixed_pool_collapses_to_enemy_lure(self, context, me, rival):
        """An enemy Lure creature removes friendly options too."""
        friend = make_card("Friend")
        decoy = make_card("Decoy", keywords=[Keyword.LURE.value])
        place(me, friend)
        place(rival, make_card("Plain"), decoy)
        assert mixed_creature_targets(context) == [decoy]

    def test_mixed_pool_without_lure(self, context, me, rival):
        friend = make_card("Friend")
        enemy = make_card("Enemy")
        place(me, friend)
        place(rival, enemy)
        assert mixed_creature_targets(context) == [friend, enemy]
