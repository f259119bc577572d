"""
Card Effects - Invoking a card's effect definition for a trigger.

This is the outer error boundary: whatever goes wrong while resolving
one card's effect is logged and turned into None, so a single broken
card cannot abort the game loop.
"""

from __future__ import annotations
from typing import Any, Optional
import logging

from ..spec_schema.effect_dsl import EffectTrigger
from .context import EffectContext, EffectResult
from .effect_resolver import EffectResolver
from .keywords import are_abilities_active
from .state import Card

logger = logging.getLogger(__name__)


def _trigger_key(trigger: EffectTrigger | str) -> str:
    return trigger.value if isinstance(trigger, EffectTrigger) else trigger


def has_effect(card: Card, trigger: EffectTrigger | str) -> bool:
    """Check if a card defines an effect for a trigger."""
    return bool(card.effects.get(_trigger_key(trigger)))


def effect_triggers(card: Card) -> list[str]:
    """Triggers the card has definitions for."""
    return [key for key, definition in card.effects.items() if definition]


def resolve_card_effect(
    card: Card,
    trigger: EffectTrigger | str,
    context: EffectContext,
    resolver: Optional[EffectResolver] = None,
) -> Optional[EffectResult]:
    """
    Resolve the card's definition for a trigger.

    Returns None when the card's abilities are cancelled or suppressed,
    when it has nothing for this trigger, or when resolution raised.
    """
    if card.abilities_cancelled or not are_abilities_active(card):
        return None

    key = _trigger_key(trigger)
    definition: Any = card.effects.get(key)
    if not definition:
        return None

    if not isinstance(definition, (dict, list)):
        logger.warning("Invalid effect definition for %s %s: %r", card.name, key, definition)
        return None

    resolver = resolver or context.resolver or EffectResolver()
    try:
        return resolver.resolve(definition, context)
    except Exception:
        logger.exception("Effect handler error: %s %s", card.name, key)
        return None
