"""
Targeting Rules - Who an ability may select.

Rules, in priority order:
1. No target, no targeting
2. Lure: always targetable, even when Invisible
3. Invisible: only casters with Acuity may target it
4. Everything else is targetable (Hidden only blocks attacks)

When a candidate pool contains Lure creatures the player must pick
one of them (must-target rule).
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Callable, Iterable

from .keywords import has_acuity, has_lure, is_invisible
from .state import Card, GameState, is_creature_card

if TYPE_CHECKING:
    from .context import EffectContext


def can_target_with_ability(
    target: Card | None,
    caster: Card | None,
    state: GameState | None = None,
) -> bool:
    """Check whether an ability cast by caster may select target."""
    if target is None:
        return False
    if has_lure(target):
        return True
    if is_invisible(target, state):
        return has_acuity(caster)
    return True


def filter_for_lure(candidates: Iterable[Card]) -> list[Card]:
    """Collapse a candidate pool to its Lure members, if it has any."""
    candidates = list(candidates)
    lured = [c for c in candidates if has_lure(c)]
    return lured if lured else candidates


def field_creatures(field_cards: Iterable[Card | None]) -> list[Card]:
    """Creatures in a field slot list, skipping empty slots."""
    return [c for c in field_cards if c is not None and is_creature_card(c)]


def targetable_enemies(
    context: EffectContext,
    predicate: Callable[[Card], bool] | None = None,
) -> list[Card]:
    """
    Enemy creatures the acting creature may select.

    Applies the visibility rule per creature and then the must-target
    rule over the resulting pool.
    """
    if context.opponent is None:
        return []
    pool = [
        c for c in field_creatures(context.opponent.field)
        if (predicate is None or predicate(c))
        and can_target_with_ability(c, context.creature, context.state)
    ]
    return filter_for_lure(pool)


def targetable_friendlies(
    context: EffectContext,
    predicate: Callable[[Card], bool] | None = None,
) -> list[Card]:
    """Friendly creatures that are not Invisible to the acting creature."""
    if context.player is None:
        return []
    return [
        c for c in field_creatures(context.player.field)
        if (predicate is None or predicate(c))
        and can_target_with_ability(c, context.creature, context.state)
    ]
