"""
Shared helpers for effect primitives.

- Building targeted prompts (with single-candidate auto-resolve)
- Targeted-response hooks (cards that react to being selected)
- Dynamic counts, card ordering, target lookup by role
"""

from __future__ import annotations
from typing import Any, Callable, Iterable
import logging

from ..context import Candidate, EffectContext, EffectResult, SelectTarget, TargetRef
from ..keywords import has_lure
from ..state import Card, is_creature_card
from ..targeting import targetable_enemies, targetable_friendlies
from .traps import fresh_attacker

logger = logging.getLogger(__name__)


CARD_TYPE_PRIORITY = {
    "prey": 0,
    "predator": 1,
    "spell": 2,
    "free spell": 3,
    "trap": 4,
}


def sort_cards_for_selection(cards: Iterable[Card]) -> list[Card]:
    """
    Order cards by type, then name.

    Prey, Predator, Spell, Free Spell, Trap. Hides draw order from the
    selecting player.
    """
    return sorted(
        cards,
        key=lambda c: (CARD_TYPE_PRIORITY.get((c.type or "").lower(), 99), c.name or ""),
    )


def plural(count: int, word: str) -> str:
    """'1 card' / '2 cards'."""
    return f"{count} {word}{'s' if count != 1 else ''}"


def make_targeted_selection(
    title: str,
    candidates: list[Candidate] | Callable[[], list[Candidate]],
    on_select: Callable[[Any], EffectResult],
    render_cards: bool = False,
    **options,
) -> EffectResult:
    """
    Build a select_target result.

    A concrete candidate list with exactly one entry resolves right away,
    as if that entry had been picked. Lazy producers are always shown.
    """
    if not callable(candidates):
        if not candidates:
            return {}
        if len(candidates) == 1:
            return on_select(candidates[0].value) or {}
    return {
        "select_target": SelectTarget(
            title=title,
            candidates=candidates,
            on_select=on_select,
            render_cards=render_cards,
            **options,
        )
    }


def handle_targeted_response(
    target: Card | None,
    source: Card | None,
    context: EffectContext,
) -> EffectResult | None:
    """Let a selected card react to being targeted; None if it does not."""
    if target is None or target.on_targeted is None:
        return None
    return target.on_targeted(context.derive(target=target, creature=source))


def respond_or(target: Card, context: EffectContext, result: EffectResult, source: Card | None = None) -> EffectResult:
    """Targeted response if the target has one, otherwise result."""
    return handle_targeted_response(target, source, context) or result


def card_candidates(
    cards: Iterable[Card],
    context: EffectContext | None = None,
    with_card: bool = False,
    label: Callable[[Card], str] | None = None,
) -> list[Candidate]:
    """Candidates whose value is the card itself."""
    state = context.state if context is not None else None
    return [
        Candidate(
            label=label(c) if label else c.name,
            value=c,
            card=c if with_card else None,
            is_recently_drawn=bool(state and state.was_recently_drawn(c)),
        )
        for c in cards
    ]


def creature_candidate(creature: Card, owner_index: int | None) -> Candidate:
    return Candidate(
        label=creature.name,
        value=TargetRef(kind="creature", creature=creature, owner_index=owner_index),
        card=creature,
    )


def player_candidate(label: str, player_index: int | None) -> Candidate:
    return Candidate(label=label, value=TargetRef(kind="player", player_index=player_index))


def resolve_dynamic_count(count: Any, context: EffectContext) -> int:
    """
    Resolve a static or named count.

    Named counts: fieldCount, enemyFieldCount, handCount, deckCount,
    carrionCount. Unknown names count as zero.
    """
    if isinstance(count, bool):
        return int(count)
    if isinstance(count, int):
        return count
    if count is None:
        return 0
    player, opponent = context.player, context.opponent
    counters = {
        "fieldCount": lambda: len(player.creatures) if player else 0,
        "enemyFieldCount": lambda: len(opponent.creatures) if opponent else 0,
        "handCount": lambda: len(player.hand) if player else 0,
        "deckCount": lambda: len(player.deck) if player else 0,
        "carrionCount": lambda: len(player.carrion) if player else 0,
    }
    counter = counters.get(count)
    if counter is None:
        logger.warning("Unknown dynamic count: %r", count)
        return 0
    return counter()


def creature_by_role(target_type: str | None, context: EffectContext) -> Card | None:
    """Resolve 'self' / 'target' / 'attacker' to a creature."""
    if target_type == "self":
        return context.creature
    if target_type == "target":
        target = context.target
        if isinstance(target, TargetRef):
            return target.subject
        return target
    if target_type == "attacker":
        return fresh_attacker(context)
    return None


def friendly_creatures(context: EffectContext, exclude: Card | None = None) -> list[Card]:
    if context.player is None:
        return []
    return [c for c in context.player.field if c is not None and is_creature_card(c) and c is not exclude]


def enemy_creatures(context: EffectContext) -> list[Card]:
    if context.opponent is None:
        return []
    return [c for c in context.opponent.field if c is not None and is_creature_card(c)]


def mixed_creature_targets(
    context: EffectContext,
    predicate: Callable[[Card], bool] | None = None,
    exclude: Card | None = None,
) -> list[Card]:
    """
    Friendly and targetable enemy creatures for an 'any creature' pick.

    When the rival has a Lure creature, only those Lure creatures remain.
    """
    def allowed(c: Card) -> bool:
        return c is not exclude and (predicate is None or predicate(c))

    enemies = targetable_enemies(context, allowed)
    if any(has_lure(c) for c in enemies):
        return enemies
    return targetable_friendlies(context, allowed) + enemies
