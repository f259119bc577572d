"""
Trap and combat-trigger primitives.

State synchronization can replace field objects between the moment a
trap trigger captures a creature and the moment its effect runs. Every
primitive here acts on the creature currently on the field, found by
instance_id, and only falls back to the captured reference when the
creature is no longer there.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..context import EffectResult, TargetRef
from ..state import Card, GameState

if TYPE_CHECKING:
    from ..context import EffectContext


# =============================================================================
# Stale reference resolution
# =============================================================================

def get_current_creature_from_field(
    stale: Card | None,
    state: GameState | None,
    owner_index: int | None,
) -> Card | None:
    """The object on owner_index's field sharing stale's instance_id, else stale."""
    if stale is None or state is None or owner_index is None:
        return stale
    owner = state.get_player(owner_index)
    if owner is None:
        return stale
    return owner.find_on_field(stale.instance_id) or stale


def get_creature_from_trap_context(context: EffectContext) -> Card | None:
    """The creature a trap refers to: target card, target, attacker, then source."""
    target = context.target
    if isinstance(target, TargetRef):
        target = target.subject
    return target or context.attacker or context.creature


def refresh_creature(creature: Card | None, context: EffectContext) -> Card | None:
    """Re-find creature on the opponent's field, then the player's."""
    if creature is None:
        return None
    current = get_current_creature_from_field(creature, context.state, context.opponent_index)
    if current is creature and context.player_index is not None:
        current = get_current_creature_from_field(creature, context.state, context.player_index)
    return current


def get_fresh_creature_for_trap(context: EffectContext) -> Card | None:
    """Current field object for the creature the trap refers to."""
    return refresh_creature(get_creature_from_trap_context(context), context)


def fresh_attacker(context: EffectContext) -> Card | None:
    """Current field object for the attacking creature."""
    return refresh_creature(context.attacker, context)


def owner_index_of(creature: Card, state: GameState | None, default: int = 0) -> int:
    """Index of the player whose field holds creature."""
    if state is not None:
        for index, player in enumerate(state.players):
            if player.find_on_field(creature.instance_id) is not None:
                return index
    return default


# =============================================================================
# Trap primitives
# =============================================================================

def remove_triggered_creature_abilities():
    """Strip abilities from the creature that sprang the trap."""
    def effect(context: EffectContext) -> EffectResult:
        creature = get_fresh_creature_for_trap(context)
        if creature is None:
            context.log("No creature to strip abilities from.")
            return {}
        context.log(f"{creature.name} loses its abilities.")
        return {"remove_abilities": creature}
    return effect


def return_triggered_to_hand():
    def effect(context: EffectContext) -> EffectResult:
        creature = get_fresh_creature_for_trap(context)
        if creature is None:
            context.log("No creature to return.")
            return {}
        owner = owner_index_of(creature, context.state, default=context.player_index or 0)
        context.log(f"{creature.name} returns to hand.")
        return {"return_to_hand": {"creatures": [creature], "player_index": owner}}
    return effect


def negate_and_kill_attacker():
    """Negate the attack; kill the attacker if there still is one."""
    def effect(context: EffectContext) -> EffectResult:
        creature = get_fresh_creature_for_trap(context)
        if creature is None:
            context.log("No attacker to kill.")
            return {"negate_attack": True}
        context.log(f"Attack negated. {creature.name} is destroyed.")
        return {"negate_attack": True, "kill_targets": [creature]}
    return effect


def return_targeted_to_hand():
    def effect(context: EffectContext) -> EffectResult:
        creature = get_fresh_creature_for_trap(context)
        if creature is None:
            context.log("No creature to return.")
            return {}
        owner = owner_index_of(creature, context.state)
        context.log(f"{creature.name} returns to hand.")
        return {"return_to_hand": {"creatures": [creature], "player_index": owner}}
    return effect


def negate_and_damage_all(creature_damage: int = 0, player_damage: int = 0):
    def effect(context: EffectContext) -> EffectResult:
        context.log(
            f"Attack negated. {creature_damage} damage to all creatures, "
            f"{player_damage} damage to both players."
        )
        return {
            "negate_attack": True,
            "damage_all_creatures": creature_damage,
            "damage_both_players": player_damage,
        }
    return effect


def negate_combat():
    def effect(context: EffectContext) -> EffectResult:
        context.log("Combat negated.")
        return {"negate_combat": True}
    return effect


# =============================================================================
# Defend triggers acting on the attacker
# =============================================================================

def kill_attacker():
    def effect(context: EffectContext) -> EffectResult:
        attacker = fresh_attacker(context)
        if attacker is None:
            context.log("No attacker to kill.")
            return {}
        context.log(f"{attacker.name} is destroyed.")
        return {"kill_targets": [attacker]}
    return effect


def deal_damage_to_attacker(damage: int = 1):
    def effect(context: EffectContext) -> EffectResult:
        attacker = fresh_attacker(context)
        if attacker is None:
            context.log("No attacker to damage.")
            return {}
        context.log(f"Deals {damage} damage to attacker.")
        return {"damage_creature": {"creature": attacker, "amount": damage, "source_label": "damage"}}
    return effect


def apply_neurotoxic_to_attacker():
    def effect(context: EffectContext) -> EffectResult:
        attacker = fresh_attacker(context)
        if attacker is None:
            context.log("No attacker to poison.")
            return {}
        context.log("Attacker is affected by neurotoxic.")
        return {"apply_neurotoxic": attacker}
    return effect


def freeze_attacker():
    def effect(context: EffectContext) -> EffectResult:
        attacker = fresh_attacker(context)
        if attacker is None:
            context.log("No attacker to freeze.")
            return {}
        context.log("Attacker gains Frozen.")
        return {"add_keyword": {"creature": attacker, "keyword": "Frozen"}}
    return effect
