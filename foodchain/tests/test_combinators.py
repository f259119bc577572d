"""
Tests for composite, repeat and conditional.
"""

from ..engine_core import primitives as p
from ..engine_core.combinators import (
    composite,
    conditional,
    has_cards_in_hand,
    has_creatures_on_field,
    opponent_has_creatures,
    repeat,
)
from ..engine_core.keywords import Keyword
from .conftest import make_card, place


def counting(result):
    """Primitive returning result and counting its calls."""
    def effect(context):
        effect.calls += 1
        return dict(result)
    effect.calls = 0
    return effect


class TestComposite:
    """Tests for composite laws."""

    def test_empty(self, context):
        assert composite([])(context) == {}

    def test_single_is_identity(self, context):
        assert composite([p.heal(2)])(context) == p.heal(2)(context)

    def test_two_results(self, context):
        result = composite([p.heal(2), p.draw(1)])(context)
        assert result == {"composite": [{"heal": 2}, {"draw": 1}]}

    def test_empty_results_dropped(self, context):
        result = composite([p.heal(2), p.select_enemy_to_kill()])(context)
        assert result == {"heal": 2}

    def test_each_effect_runs_once(self, context):
        a, b = counting({"heal": 1}), counting({"draw": 1})
        composite([a, b])(context)
        assert (a.calls, b.calls) == (1, 1)


class TestRepeat:
    """Tests for repeat."""

    def test_zero(self, context):
        assert repeat(p.heal(1), 0)(context) == {}

    def test_negative(self, context):
        assert repeat(p.heal(1), -2)(context) == {}

    def test_once(self, context):
        assert repeat(p.heal(1), 1)(context) == {"heal": 1}

    def test_three_times(self, context):
        effect = counting({"draw": 1})
        result = repeat(effect, 3)(context)
        assert result == {"composite": [{"draw": 1}] * 3}
        assert effect.calls == 3


class TestConditional:
    """Tests for conditional branching."""

    def test_true_branch_only(self, context):
        if_true, if_false = counting({"heal": 1}), counting({"draw": 1})
        result = conditional(lambda ctx: True, if_true, if_false)(context)
        assert result == {"heal": 1}
        assert (if_true.calls, if_false.calls) == (1, 0)

    def test_false_branch_only(self, context):
        if_true, if_false = counting({"heal": 1}), counting({"draw": 1})
        result = conditional(lambda ctx: False, if_true, if_false)(context)
        assert result == {"draw": 1}
        assert (if_true.calls, if_false.calls) == (0, 1)

    def test_false_without_else(self, context):
        assert conditional(lambda ctx: False, p.heal(1))(context) == {}

    def test_condition_evaluated_once(self, context):
        calls = []

        def condition(ctx):
            calls.append(ctx)
            return True

        conditional(condition, p.heal(1), p.draw(1))(context)
        assert len(calls) == 1


class TestConditions:
    """Tests for the built-in condition predicates."""

    def test_has_cards_in_hand(self, context, me):
        assert has_cards_in_hand()(context) is False
        me.hand.extend([make_card("A"), make_card("B")])
        assert has_cards_in_hand()(context) is True
        assert has_cards_in_hand(min_count=3)(context) is False

    def test_has_creatures_on_field(self, context, me):
        assert has_creatures_on_field()(context) is False
        place(me, make_card("A"))
        assert has_creatures_on_field()(context) is True

    def test_opponent_creatures_ignore_invisible(self, context, rival):
        place(rival, make_card("Ghost", keywords=[Keyword.INVISIBLE.value]))
        assert opponent_has_creatures()(context) is False
        rival.field[1] = make_card("Plain")
        assert opponent_has_creatures()(context) is True
