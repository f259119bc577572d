"""
Combinators - Building larger effects out of primitives.

- composite: several effects against the same context
- repeat: one effect several times
- conditional: one of two effects, chosen by a predicate
"""

from __future__ import annotations
from typing import Callable, Optional

from .context import EffectContext, EffectResult, Primitive
from .keywords import is_invisible
from .primitives.common import enemy_creatures, friendly_creatures

Condition = Callable[[EffectContext], bool]


def collect(results: list[EffectResult]) -> EffectResult:
    """{} for none, the result itself for one, {"composite": [...]} otherwise."""
    results = [r for r in results if r]
    if not results:
        return {}
    if len(results) == 1:
        return results[0]
    return {"composite": results}


def composite(effects: list[Primitive]) -> Primitive:
    """Apply each effect in order to the same context."""
    def effect(context: EffectContext) -> EffectResult:
        return collect([e(context) for e in effects])
    return effect


def repeat(effect: Primitive, count: int) -> Primitive:
    """Apply effect count times; a non-positive count does nothing."""
    def repeated(context: EffectContext) -> EffectResult:
        return collect([effect(context) for _ in range(max(count, 0))])
    return repeated


def conditional(
    condition: Condition,
    effect_if_true: Primitive,
    effect_if_false: Optional[Primitive] = None,
) -> Primitive:
    """Evaluate condition once and run exactly one branch."""
    def effect(context: EffectContext) -> EffectResult:
        if condition(context):
            return effect_if_true(context)
        if effect_if_false is not None:
            return effect_if_false(context)
        return {}
    return effect


# =============================================================================
# Conditions
# =============================================================================

def has_cards_in_hand(min_count: int = 1) -> Condition:
    def condition(context: EffectContext) -> bool:
        return context.player is not None and len(context.player.hand) >= min_count
    return condition


def has_creatures_on_field(min_count: int = 1) -> Condition:
    def condition(context: EffectContext) -> bool:
        return len(friendly_creatures(context)) >= min_count
    return condition


def opponent_has_creatures(min_count: int = 1) -> Condition:
    """Counts only enemy creatures that are not Invisible."""
    def condition(context: EffectContext) -> bool:
        visible = [c for c in enemy_creatures(context) if not is_invisible(c, context.state)]
        return len(visible) >= min_count
    return condition
