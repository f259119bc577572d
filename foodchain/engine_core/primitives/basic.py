"""
Basic primitives: player-level results and single-creature mutators.

Each primitive is a factory: the outer call binds static parameters,
the returned function takes an EffectContext and returns an
EffectResult. Unmet preconditions give {} after a log line.
"""

from __future__ import annotations
from typing import Any, Callable, TypeVar

from pydantic import BaseModel

from ...spec_schema.effect_dsl import AddKeywordParams, BuffParams, DestroyParams
from ..context import EffectContext, EffectResult, Primitive
from ..state import is_predator, is_prey, is_spell
from ..targeting import targetable_enemies
from .common import (
    card_candidates,
    creature_by_role,
    friendly_creatures,
    enemy_creatures,
    make_targeted_selection,
    mixed_creature_targets,
    plural,
    resolve_dynamic_count,
)

M = TypeVar("M", bound=BaseModel)


def coerce_params(model: type[M], params: Any) -> M:
    """Accept a params model, a dict or None."""
    if isinstance(params, model):
        return params
    return model.model_validate(params or {})


# =============================================================================
# Player-level
# =============================================================================

def heal(amount: int) -> Primitive:
    """Heal the acting player. Clamping is up to the state layer."""
    def effect(context: EffectContext) -> EffectResult:
        context.log(f"Heals {amount} HP.")
        return {"heal": amount}
    return effect


def draw(count: int | str) -> Primitive:
    """Draw a static or named (e.g. 'handCount') number of cards."""
    def effect(context: EffectContext) -> EffectResult:
        resolved = resolve_dynamic_count(count, context)
        if resolved <= 0:
            context.log("No cards to draw.")
            return {}
        verb = "Draws" if resolved > 1 else "Draw"
        context.log(f"{verb} {plural(resolved, 'card')}.")
        return {"draw": resolved}
    return effect


def damage_rival(amount: int) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        context.log(f"Deals {amount} damage to rival.")
        return {"damage_opponent": amount}
    return effect


def summon_tokens(token_ids: list[str] | str) -> Primitive:
    tokens = list(token_ids) if isinstance(token_ids, (list, tuple)) else [token_ids]

    def effect(context: EffectContext) -> EffectResult:
        if not tokens:
            context.log("No tokens to summon.")
            return {}
        context.log(f"Summons {plural(len(tokens), 'token')}.")
        return {"summon_tokens": {"player_index": context.player_index, "tokens": list(tokens)}}
    return effect


def add_to_hand(card_id: str) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        context.log("Adds a card to hand.")
        return {"add_to_hand": {"player_index": context.player_index, "card": card_id}}
    return effect


def discard_cards(count: int = 1) -> Primitive:
    """Discard at random from the acting player's hand."""
    def effect(context: EffectContext) -> EffectResult:
        context.log(f"Discards {plural(count, 'card')}.")
        return {"discard_random": {"player_index": context.player_index, "count": count}}
    return effect


def reveal_cards(count: int = 1) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        context.log(f"Reveals {plural(count, 'card')} from rival's hand.")
        return {"reveal_cards": {"player_index": context.opponent_index, "count": count}}
    return effect


def reveal_hand(duration_ms: int | None = None) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        duration = duration_ms if duration_ms is not None else context.settings.reveal_hand_duration_ms
        context.log("Rival's hand is revealed.")
        return {"reveal_hand": {"player_index": context.opponent_index, "duration_ms": duration}}
    return effect


def draw_and_reveal_hand(draw_count: int = 1) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        context.log(f"Drawing {draw_count}. Rival's hand is revealed.")
        return {
            "draw": draw_count,
            "reveal_hand": {
                "player_index": context.opponent_index,
                "duration_ms": context.settings.reveal_hand_duration_ms,
            },
        }
    return effect


def tutor(card_type: str = "any") -> Primitive:
    """Ask the state layer to run a deck search for card_type."""
    matches = _card_type_filter(card_type)

    def effect(context: EffectContext) -> EffectResult:
        valid = [c for c in context.player.deck if matches(c)]
        if not valid:
            context.log("No valid cards in deck.")
            return {}
        return {
            "request_tutor": {
                "player_index": context.player_index,
                "valid_cards": valid,
                "card_type": card_type,
            }
        }
    return effect


def _card_type_filter(card_type: str | None) -> Callable[[Any], bool]:
    if card_type == "prey":
        return is_prey
    if card_type == "predator":
        return is_predator
    if card_type == "spell":
        return is_spell
    return lambda card: True


# =============================================================================
# Flags
# =============================================================================

def _flag(key: str, message: str) -> Callable[[], Primitive]:
    def factory() -> Primitive:
        def effect(context: EffectContext) -> EffectResult:
            context.log(message)
            return {key: True}
        return effect
    factory.__name__ = key
    factory.__doc__ = message
    return factory


negate_attack = _flag("negate_attack", "Attack is negated.")
negate_damage = _flag("negate_damage", "Damage is negated.")
negate_play = _flag("negate_play", "Card play is negated.")
end_turn = _flag("end_turn", "Turn ends.")


def allow_replay(exclude_negated: bool = False) -> Primitive:
    """Let the rival play a different card after a negation."""
    def effect(context: EffectContext) -> EffectResult:
        context.log("Rival may play a different card.")
        return {"allow_replay": True, "exclude_negated": exclude_negated}
    return effect


def negate_and_allow_replay() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        context.log("Play negated. Rival may play a different card.")
        return {"negate_play": True, "allow_replay": True}
    return effect


# =============================================================================
# Single creature by role
# =============================================================================

def damage_creature(target_type: str, amount: int, source_label: str = "damage") -> Primitive:
    """Damage the 'self', 'target' or 'attacker' creature."""
    def effect(context: EffectContext) -> EffectResult:
        creature = creature_by_role(target_type, context)
        if creature is None:
            context.log(f"No valid target for {source_label}.")
            return {}
        context.log(f"Deals {amount} {source_label} damage to {creature.name}.")
        return {"damage_creature": {"creature": creature, "amount": amount, "source_label": source_label}}
    return effect


def kill_creature(target_type: str) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        creature = creature_by_role(target_type, context)
        if creature is None:
            context.log("No creature to destroy.")
            return {}
        context.log(f"{creature.name} is destroyed.")
        return {"kill_creature": creature}
    return effect


def transform_card(target_type: str, new_card_id: str) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        creature = creature_by_role(target_type, context)
        if creature is None:
            context.log("No creature to transform.")
            return {}
        context.log(f"{creature.name} transforms.")
        return {"transform_card": {"card": creature, "new_card_data": new_card_id}}
    return effect


def remove_abilities(target_type: str) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        creature = creature_by_role(target_type, context)
        if creature is None:
            context.log("No creature to strip abilities from.")
            return {}
        context.log(f"{creature.name} loses all abilities.")
        return {"remove_abilities": creature}
    return effect


def copy_abilities(source: str) -> Primitive:
    """Copy abilities from the 'consumed' card or the 'target' onto the source creature."""
    def effect(context: EffectContext) -> EffectResult:
        if source == "consumed":
            origin = context.consumed_card
        elif source == "target":
            origin = creature_by_role("target", context)
        else:
            origin = None
        if origin is None or context.creature is None:
            context.log("No valid card to copy abilities from.")
            return {}
        context.log(f"{context.creature.name} copies abilities from {origin.name}.")
        return {"copy_abilities": {"target": context.creature, "source": origin}}
    return effect


def revive_creature() -> Primitive:
    """Bring back the creature that just died."""
    def effect(context: EffectContext) -> EffectResult:
        if context.creature is None:
            context.log("No creature to revive.")
            return {}
        context.log(f"{context.creature.name} revives.")
        return {"revive_creature": {"creature": context.creature, "player_index": context.player_index}}
    return effect


def regen_self() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        if context.creature is None:
            context.log("No creature to regenerate.")
            return {}
        context.log(f"{context.creature.name} regenerates.")
        return {"regen_creature": context.creature}
    return effect


def track_attack_for_regen_heal(heal_amount: int = 0) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        if context.creature is None:
            return {}
        context.log(f"If attacked in combat, will regen and heal {heal_amount} during Main 2.")
        return {"track_attack_for_regen_heal": {"creature": context.creature, "heal_amount": heal_amount}}
    return effect


# =============================================================================
# Keywords and stats
# =============================================================================

def grant_keyword(target_type: str, keyword: str) -> Primitive:
    """Grant keyword to 'self', 'target' or every friendly creature ('all-friendly')."""
    def effect(context: EffectContext) -> EffectResult:
        if target_type == "all-friendly":
            creatures = friendly_creatures(context)
            if not creatures:
                context.log(f"No creatures to grant {keyword}.")
                return {}
            context.log(f"All friendly creatures gain {keyword}.")
            return {"grant_keyword_to_all": {"creatures": creatures, "keyword": keyword}}
        creature = creature_by_role(target_type, context)
        if creature is None:
            context.log(f"No creature to grant {keyword}.")
            return {}
        context.log(f"{creature.name} gains {keyword}.")
        return {"grant_keyword": {"creature": creature, "keyword": keyword}}
    return effect


def add_keyword(params: AddKeywordParams | dict) -> Primitive:
    """
    Grant a keyword by target mode.

    - friendlyCreatures: every friendly creature
    - targetCreature: pick any creature (an enemy Lure restricts the pick)
    - self: the source creature
    """
    params = coerce_params(AddKeywordParams, params)
    keyword = params.keyword[:1].upper() + params.keyword[1:]

    def effect(context: EffectContext) -> EffectResult:
        if params.target == "friendlyCreatures":
            creatures = friendly_creatures(context)
            if not creatures:
                context.log(f"No creatures to grant {keyword}.")
                return {}
            context.log(f"All friendly creatures gain {keyword}.")
            return {"grant_keyword_to_all": {"creatures": creatures, "keyword": keyword}}

        if params.target == "targetCreature":
            targets = mixed_creature_targets(context)
            if not targets:
                context.log(f"No creatures to grant {keyword}.")
                return {}

            def on_select(selected):
                context.log(f"{selected.name} gains {keyword}.")
                return {"add_keyword": {"creature": selected, "keyword": keyword}}

            return make_targeted_selection(
                title=f"Choose creature to gain {keyword}",
                candidates=card_candidates(targets, context, with_card=True),
                on_select=on_select,
                render_cards=True,
            )

        if params.target == "self" and context.creature is not None:
            context.log(f"{context.creature.name} gains {keyword}.")
            return {"add_keyword": {"creature": context.creature, "keyword": keyword}}

        return {}
    return effect


def buff_stats(target_type: str, stats: dict | None = None) -> Primitive:
    """Buff 'self', 'target' or every friendly creature ('all-friendly')."""
    stats = stats or {}
    attack, health = stats.get("attack", 0), stats.get("health", 0)

    def effect(context: EffectContext) -> EffectResult:
        if target_type == "all-friendly":
            creatures = friendly_creatures(context)
            if not creatures:
                context.log("No creatures to buff.")
                return {}
            context.log(f"All friendly creatures gain +{attack}/+{health}.")
            return {"buff_creatures": {"creatures": creatures, "attack": attack, "health": health}}
        creature = creature_by_role(target_type, context)
        if creature is None:
            context.log("No creature to buff.")
            return {}
        context.log(f"{creature.name} gains +{attack}/+{health}.")
        return {"buff_creature": {"creature": creature, "attack": attack, "health": health}}
    return effect


def buff(params: BuffParams | dict) -> Primitive:
    """
    Buff by target mode: friendlyCreatures, self, targetCreature,
    targetPredator or targetEnemy.
    """
    params = coerce_params(BuffParams, params)
    attack, health = params.attack, params.health

    def effect(context: EffectContext) -> EffectResult:
        if params.target == "friendlyCreatures":
            creatures = friendly_creatures(context)
            if not creatures:
                context.log("No creatures to buff.")
                return {}
            context.log(f"All friendly creatures gain +{attack}/+{health}.")
            return {"buff_creatures": {"creatures": creatures, "attack": attack, "health": health}}

        if params.target == "self":
            if context.creature is None:
                return {}
            context.log(f"{context.creature.name} gains +{attack}/+{health}.")
            return {"buff_creature": {"creature": context.creature, "attack": attack, "health": health}}

        title = "Choose a creature to buff"
        if params.target == "targetPredator":
            targets = [c for c in friendly_creatures(context) if is_predator(c)]
            title = "Choose a Predator to buff"
        elif params.target == "targetCreature":
            targets = friendly_creatures(context)
        elif params.target == "targetEnemy":
            targets = targetable_enemies(context)
            title = "Choose a Rival's creature to buff"
        else:
            targets = []

        if not targets:
            context.log("No valid targets for buff.")
            return {}

        def on_select(selected):
            context.log(f"{selected.name} gains +{attack}/+{health}.")
            return {"buff_creature": {"creature": selected, "attack": attack, "health": health}}

        return make_targeted_selection(title, card_candidates(targets, context), on_select)
    return effect


# =============================================================================
# Destroy
# =============================================================================

def destroy(params: DestroyParams | dict | None = None) -> Primitive:
    """
    Remove creatures without reducing HP (no onSlain).

    target: enemyCreatures, allCreatures or targetEnemy (default).
    """
    params = coerce_params(DestroyParams, params)

    def effect(context: EffectContext) -> EffectResult:
        if params.target == "enemyCreatures":
            targets = enemy_creatures(context)
            if not targets:
                context.log("No Rival's creatures to destroy.")
                return {}
            context.log("All Rival's creatures are destroyed.")
            return {"destroy_creatures": {"creatures": targets, "owner_index": context.opponent_index}}

        if params.target == "allCreatures":
            own, theirs = friendly_creatures(context), enemy_creatures(context)
            if not own and not theirs:
                context.log("No creatures to destroy.")
                return {}
            context.log("All creatures are destroyed.")
            return {
                "destroy_creatures": {"creatures": own, "owner_index": context.player_index},
                "destroy_creatures_opponent": {"creatures": theirs, "owner_index": context.opponent_index},
            }

        if params.target == "targetEnemy":
            targets = targetable_enemies(context)
            if not targets:
                context.log("No Rival's creatures to target.")
                return {}

            def on_select(target):
                context.log(f"{target.name} is destroyed.")
                return {"destroy_creatures": {"creatures": [target], "owner_index": context.opponent_index}}

            return make_targeted_selection(
                "Choose a Rival's creature to destroy",
                card_candidates(targets, context),
                on_select,
            )

        return {}
    return effect
