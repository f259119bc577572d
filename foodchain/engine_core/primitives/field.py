"""
Field-scanning primitives.

These act on every creature matching a rule rather than asking for a
pick. An empty match set returns {} after a log line, except where the
descriptor alone is meaningful (flat damage to a whole side).
"""

from __future__ import annotations

from ..context import EffectContext, EffectResult, Primitive
from ..keywords import Keyword, is_invisible
from ..state import is_predator, is_prey, is_token
from .common import enemy_creatures, friendly_creatures


def freeze_all_creatures() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        creatures = friendly_creatures(context) + enemy_creatures(context)
        if not creatures:
            context.log("No creatures to freeze.")
            return {}
        context.log("All creatures gain Frozen.")
        return {"grant_keyword_to_all": {"creatures": creatures, "keyword": Keyword.FROZEN.value}}
    return effect


def freeze_all_enemies() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        enemies = enemy_creatures(context)
        if not enemies:
            context.log("No Rival's creatures to freeze.")
            return {}
        context.log("All Rival's creatures gain Frozen.")
        return {"grant_keyword_to_all": {"creatures": enemies, "keyword": Keyword.FROZEN.value}}
    return effect


def remove_frozen_from_friendlies() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        creatures = friendly_creatures(context)
        if not creatures:
            context.log("No creatures to thaw.")
            return {}
        context.log("All friendly creatures lose Frozen.")
        return {"remove_keyword_from_all": {"creatures": creatures, "keyword": Keyword.FROZEN.value}}
    return effect


_KILL_ALL_RULES = {
    "all-prey": (is_prey, True, "All prey creatures are destroyed."),
    "all-predators": (is_predator, True, "All predator creatures are destroyed."),
    "all-enemy": (lambda c: True, False, "All Rival's creatures are destroyed."),
    "all": (lambda c: True, True, "All creatures are destroyed."),
}


def kill_all(target_type: str) -> Primitive:
    """
    Kill every creature matching target_type.

    target_type: all-prey, all-predators, all-enemy or all. Invisible
    enemy creatures are spared.
    """
    def effect(context: EffectContext) -> EffectResult:
        rule = _KILL_ALL_RULES.get(target_type)
        if rule is None:
            context.log("No creatures to destroy.")
            return {}
        matches, include_friendly, message = rule
        targets = [c for c in friendly_creatures(context) if matches(c)] if include_friendly else []
        targets += [
            c for c in enemy_creatures(context)
            if matches(c) and not is_invisible(c, context.state)
        ]
        if not targets:
            context.log("No creatures to destroy.")
            return {}
        context.log(message)
        return {"kill_all_creatures": targets}
    return effect


def grant_barrier() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        if not friendly_creatures(context):
            context.log("No creatures to grant Barrier.")
            return {}
        context.log("All friendly creatures gain Barrier.")
        return {"grant_barrier": {"player": context.player}}
    return effect


def remove_abilities_all() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        targets = enemy_creatures(context)
        if not targets:
            context.log("No Rival's creatures to strip abilities.")
            return {}
        context.log("All Rival's creatures lose their abilities.")
        return {"remove_abilities_all": targets}
    return effect


# =============================================================================
# Damage
# =============================================================================

def damage_all_creatures(amount: int) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        context.log(f"Deals {amount} damage to all creatures.")
        return {"damage_all_creatures": amount}
    return effect


def damage_all_enemy_creatures(amount: int) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        context.log(f"Deals {amount} damage to Rival's creatures.")
        return {"damage_enemy_creatures": amount}
    return effect


def damage_both_players(amount: int) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        context.log(f"Deals {amount} damage to both players.")
        return {"damage_both_players": amount}
    return effect


def damage_other_creatures(amount: int) -> Primitive:
    """Damage every creature except the source."""
    def effect(context: EffectContext) -> EffectResult:
        others = friendly_creatures(context, exclude=context.creature) + enemy_creatures(context)
        if not others:
            context.log("No other creatures to damage.")
            return {}
        context.log(f"Deals {amount} damage to other creatures.")
        return {"damage_creatures": {"creatures": others, "amount": amount, "source_label": "damage"}}
    return effect


def damage_all_enemies_multiple(amount: int, applications: int = 2) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        total = amount * applications
        context.log(f"Deals {total} total damage to Rival's creatures.")
        return {"damage_enemy_creatures": total}
    return effect


def damage_enemies_after_combat(damage: int) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        enemies = enemy_creatures(context)
        if not enemies:
            context.log("No Rival's creatures to damage.")
            return {}
        context.log(f"Deals {damage} damage to all Rival's creatures.")
        return {"damage_creatures": {"creatures": enemies, "amount": damage, "source_label": "damage"}}
    return effect


def damage_all_and_freeze_all(damage: int) -> Primitive:
    """Damage both players and every other creature, then freeze those creatures."""
    def effect(context: EffectContext) -> EffectResult:
        others = friendly_creatures(context, exclude=context.creature) + enemy_creatures(context)
        context.log(f"Deals {damage} damage to players & other animals. All gain Frozen.")
        result: EffectResult = {"damage_both_players": damage}
        if others:
            result["damage_creatures"] = {"creatures": others, "amount": damage, "source_label": "damage"}
            result["grant_keyword_to_all"] = {"creatures": others, "keyword": Keyword.FROZEN.value}
        return result
    return effect


# =============================================================================
# Removal
# =============================================================================

def return_all_enemies() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        enemies = enemy_creatures(context)
        if not enemies:
            context.log("No Rival's creatures to return.")
            return {}
        context.log("All Rival's creatures returned to hand.")
        return {"return_to_hand": {"creatures": enemies, "player_index": context.opponent_index}}
    return effect


def kill_enemy_tokens() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        tokens = [c for c in enemy_creatures(context) if is_token(c)]
        if not tokens:
            context.log("No Rival's tokens to kill.")
            return {}
        context.log("All Rival's tokens are destroyed.")
        return {"kill_targets": tokens}
    return effect


def kill_enemy_tokens_effect() -> Primitive:
    """Spell form of kill_enemy_tokens."""
    def effect(context: EffectContext) -> EffectResult:
        tokens = [c for c in enemy_creatures(context) if is_token(c)]
        context.log("Destroying Rival's tokens.")
        if not tokens:
            return {}
        return {"kill_targets": tokens}
    return effect


def kill_all_enemy_creatures() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        if not enemy_creatures(context):
            context.log("No Rival's creatures to destroy.")
            return {}
        context.log("All Rival's creatures are destroyed.")
        return {"kill_enemy_creatures": context.opponent_index}
    return effect


def regen_other_creatures() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        others = friendly_creatures(context, exclude=context.creature)
        if not others:
            context.log("No other creatures to regenerate.")
            return {}
        context.log("Regenerates other creatures.")
        return {"regen_creatures": others}
    return effect
