"""
Effect Registry - Maps every EffectType to the primitive that implements it.

A Binding knows how to turn a definition's params into a primitive:
- args: ordered JSON param keys, bound as keyword arguments
  (camelCase keys become snake_case names; absent keys keep defaults)
- model: validate the whole params object with a pydantic model
- binder: custom construction for nodes that nest definitions

EffectRegistry checks at construction that every EffectType is bound.
There is no module-level registry instance; build one with
build_default_registry() and hand it to an EffectResolver.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Union
import re

from pydantic import BaseModel

from ..errors import EffectDefinitionError
from ..spec_schema.effect_dsl import (
    AddKeywordParams,
    BuffParams,
    ChoiceParams,
    ChooseOptionParams,
    ConditionNode,
    ConditionType,
    DestroyParams,
    EffectType,
    SelectFromGroupParams,
)
from . import combinators
from . import primitives as p
from .context import Primitive

if TYPE_CHECKING:
    from .effect_resolver import EffectResolver

ArgSpec = Union[str, tuple[str, str]]
Binder = Callable[[dict[str, Any], "EffectResolver"], Primitive]

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case(name: str) -> str:
    """'sourceLabel' -> 'source_label'."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


@dataclass(frozen=True)
class Binding:
    """How one effect type is built from its params."""
    factory: Callable[..., Primitive]
    args: tuple[ArgSpec, ...] = ()
    model: Optional[type[BaseModel]] = None
    binder: Optional[Binder] = None

    @property
    def arg_keys(self) -> list[str]:
        """JSON param keys, in argument order."""
        return [a if isinstance(a, str) else a[0] for a in self.args]

    def bind(self, params: Any, resolver: EffectResolver) -> Primitive:
        if self.binder is not None:
            return self.binder(params or {}, resolver)
        if self.model is not None:
            return self.factory(self.model.model_validate(params or {}))
        if isinstance(params, (list, tuple)):
            return self.factory(*params)
        params = params or {}
        kwargs = {}
        for arg in self.args:
            key, name = (arg, snake_case(arg)) if isinstance(arg, str) else arg
            if key in params:
                kwargs[name] = params[key]
        return self.factory(**kwargs)


# =============================================================================
# Nested definitions
# =============================================================================

def lazy(definition: Any, resolver: EffectResolver) -> Primitive:
    """Primitive that resolves definition only when it runs."""
    def effect(context):
        return resolver.resolve(definition, context)
    return effect


def _bind_composite(params: dict[str, Any], resolver: EffectResolver) -> Primitive:
    return combinators.composite([lazy(d, resolver) for d in params.get("effects") or []])


def _bind_repeat(params: dict[str, Any], resolver: EffectResolver) -> Primitive:
    if "effect" not in params:
        raise EffectDefinitionError(["repeat requires 'effect'"])
    return combinators.repeat(lazy(params["effect"], resolver), int(params.get("count", 1)))


def _bind_conditional(params: dict[str, Any], resolver: EffectResolver) -> Primitive:
    if "condition" not in params or "effectIfTrue" not in params:
        raise EffectDefinitionError(["conditional requires 'condition' and 'effectIfTrue'"])
    condition = resolver.registry.build_condition(params["condition"])
    if_false = params.get("effectIfFalse")
    return combinators.conditional(
        condition,
        lazy(params["effectIfTrue"], resolver),
        lazy(if_false, resolver) if if_false else None,
    )


def _bind_select_target(params: dict[str, Any], resolver: EffectResolver) -> Primitive:
    return p.select_target(params.get("selectionType", "any"), lazy(params.get("effect"), resolver))


def _bind_select_consume(params: dict[str, Any], resolver: EffectResolver) -> Primitive:
    nested = params.get("effect")
    return p.select_consume(
        params.get("cardType", "any"),
        params.get("count", 1),
        lazy(nested, resolver) if nested else None,
    )


def _bind_select_creature_for_buff(params: dict[str, Any], resolver: EffectResolver) -> Primitive:
    # Card data gives either {stats: {...}} or the stats themselves
    return p.select_creature_for_buff(params.get("stats", params))


# =============================================================================
# Conditions
# =============================================================================

DEFAULT_CONDITIONS: dict[ConditionType, Callable[..., combinators.Condition]] = {
    ConditionType.HAS_CARDS_IN_HAND: combinators.has_cards_in_hand,
    ConditionType.HAS_CREATURES_ON_FIELD: combinators.has_creatures_on_field,
    ConditionType.OPPONENT_HAS_CREATURES: combinators.opponent_has_creatures,
}


# =============================================================================
# Registry
# =============================================================================

class EffectRegistry:
    """Closed mapping from EffectType to Binding."""

    def __init__(
        self,
        bindings: Mapping[EffectType, Binding],
        conditions: Optional[Mapping[ConditionType, Callable[..., combinators.Condition]]] = None,
    ):
        missing = [t.value for t in EffectType if t not in bindings]
        if missing:
            raise EffectDefinitionError([f"No binding for effect type {m!r}" for m in missing])
        self._bindings = dict(bindings)
        self._conditions = dict(conditions if conditions is not None else DEFAULT_CONDITIONS)

    def __contains__(self, effect_type: Any) -> bool:
        return self.binding_for(effect_type) is not None

    def __len__(self) -> int:
        return len(self._bindings)

    def binding_for(self, effect_type: Any) -> Optional[Binding]:
        """Binding for a type string or EffectType, None if unknown."""
        member = effect_type if isinstance(effect_type, EffectType) else EffectType.lookup(effect_type)
        if member is None:
            return None
        return self._bindings.get(member)

    def build_condition(self, node: Any) -> combinators.Condition:
        """Condition predicate for a {type, params} condition node."""
        condition = ConditionNode.model_validate(node)
        factory = self._conditions.get(condition.type)
        if factory is None:
            raise EffectDefinitionError([f"Unknown condition type: {condition.type.value!r}"])
        kwargs = {snake_case(k): v for k, v in condition.params.items()}
        return factory(**kwargs)


def _b(factory: Callable[..., Primitive], *args: ArgSpec) -> Binding:
    return Binding(factory=factory, args=args)


def _m(factory: Callable[..., Primitive], model: type[BaseModel]) -> Binding:
    return Binding(factory=factory, model=model)


def _c(binder: Binder) -> Binding:
    return Binding(factory=binder, binder=binder)


T = EffectType

DEFAULT_BINDINGS: dict[EffectType, Binding] = {
    # Basic
    T.HEAL: _b(p.heal, "amount"),
    T.DRAW: _b(p.draw, "count"),
    T.DAMAGE_RIVAL: _b(p.damage_rival, "amount"),
    T.DAMAGE_CREATURE: _b(p.damage_creature, "targetType", "amount", "sourceLabel"),
    T.SUMMON_TOKENS: _b(p.summon_tokens, "tokenIds"),
    T.ADD_TO_HAND: _b(p.add_to_hand, "cardId"),
    T.TRANSFORM_CARD: _b(p.transform_card, "targetType", "newCardId"),
    T.KILL_CREATURE: _b(p.kill_creature, "targetType"),
    T.DESTROY: _m(p.destroy, DestroyParams),
    T.GRANT_KEYWORD: _b(p.grant_keyword, "targetType", "keyword"),
    T.ADD_KEYWORD: _m(p.add_keyword, AddKeywordParams),
    T.BUFF_STATS: _b(p.buff_stats, "targetType", "stats"),
    T.BUFF: _m(p.buff, BuffParams),

    # Selection
    T.SELECT_TARGET: _c(_bind_select_target),
    T.SELECT_CONSUME: _c(_bind_select_consume),

    # Control flow
    T.CONDITIONAL: _c(_bind_conditional),
    T.COMPOSITE: _c(_bind_composite),
    T.REPEAT: _c(_bind_repeat),

    # Advanced
    T.NEGATE_ATTACK: _b(p.negate_attack),
    T.NEGATE_DAMAGE: _b(p.negate_damage),
    T.NEGATE_PLAY: _b(p.negate_play),
    T.ALLOW_REPLAY: _b(p.allow_replay, "excludeNegated"),
    T.KILL_ATTACKER: _b(p.kill_attacker),
    T.FREEZE_ALL_CREATURES: _b(p.freeze_all_creatures),
    T.DISCARD_CARDS: _b(p.discard_cards, "count"),
    T.REVEAL_CARDS: _b(p.reveal_cards, "count"),
    T.TUTOR: _b(p.tutor, "cardType"),
    T.COPY_ABILITIES: _b(p.copy_abilities, "source"),
    T.STEAL_CREATURE: _b(p.steal_creature, "targetType"),
    T.KILL_ALL: _b(p.kill_all, "targetType"),
    T.REVEAL_HAND: _b(p.reveal_hand, "durationMs"),
    T.GRANT_BARRIER: _b(p.grant_barrier),
    T.REMOVE_ABILITIES: _b(p.remove_abilities, "targetType"),
    T.REMOVE_ABILITIES_ALL: _b(p.remove_abilities_all),

    # Selection-based
    T.SELECT_PREDATOR_FOR_END_EFFECT: _b(p.select_predator_for_end_effect, "tokenId"),
    T.SELECT_CARD_TO_DISCARD: _b(p.select_card_to_discard, "count"),
    T.SELECT_AND_DISCARD: _b(p.select_and_discard, "count"),
    T.SELECT_ENEMY_TO_KILL: _b(p.select_enemy_to_kill),
    T.TUTOR_FROM_DECK: _b(p.tutor_from_deck, "cardType"),
    T.SELECT_CREATURE_FOR_DAMAGE: _b(p.select_creature_for_damage, "amount", "label"),
    T.SELECT_TARGET_FOR_DAMAGE: _b(p.select_target_for_damage, "amount", "label"),
    T.SELECT_ENEMY_PREY_TO_CONSUME: _b(p.select_enemy_prey_to_consume),
    T.SELECT_CREATURE_TO_RESTORE: _b(p.select_creature_to_restore),

    # Flexible selection
    T.SELECT_FROM_GROUP: _m(p.select_from_group, SelectFromGroupParams),
    T.CHOOSE_OPTION: _m(p.choose_option, ChooseOptionParams),
    T.CHOICE: _m(p.choice, ChoiceParams),

    # Field and global
    T.DAMAGE_ALL_CREATURES: _b(p.damage_all_creatures, "amount"),
    T.DAMAGE_ALL_ENEMY_CREATURES: _b(p.damage_all_enemy_creatures, "amount"),
    T.DAMAGE_BOTH_PLAYERS: _b(p.damage_both_players, "amount"),
    T.DAMAGE_OTHER_CREATURES: _b(p.damage_other_creatures, "amount"),
    T.RETURN_ALL_ENEMIES: _b(p.return_all_enemies),
    T.KILL_ENEMY_TOKENS: _b(p.kill_enemy_tokens),
    T.KILL_ALL_ENEMY_CREATURES: _b(p.kill_all_enemy_creatures),
    T.SELECT_ENEMY_FOR_KEYWORD: _b(p.select_enemy_for_keyword, "keyword"),
    T.SELECT_ENEMY_CREATURE_FOR_DAMAGE: _b(p.select_enemy_creature_for_damage, "amount", "label"),
    T.SELECT_CREATURE_TO_COPY: _b(p.select_creature_to_copy),
    T.SELECT_PREY_FOR_BUFF: _b(p.select_prey_for_buff, "stats"),
    T.SELECT_CREATURE_FOR_BUFF: _c(_bind_select_creature_for_buff),
    T.SELECT_CREATURE_TO_TRANSFORM: _b(p.select_creature_to_transform, "newCardId"),

    # Traps
    T.REMOVE_TRIGGERED_CREATURE_ABILITIES: _b(p.remove_triggered_creature_abilities),
    T.NEGATE_AND_DAMAGE_ALL: _b(p.negate_and_damage_all, "creatureDamage", "playerDamage"),
    T.RETURN_TRIGGERED_TO_HAND: _b(p.return_triggered_to_hand),
    T.NEGATE_AND_KILL_ATTACKER: _b(p.negate_and_kill_attacker),
    T.NEGATE_COMBAT: _b(p.negate_combat),

    # Amphibian
    T.DAMAGE_RIVAL_AND_SELECT_ENEMY: _b(p.damage_rival_and_select_enemy, "rivalDamage", "creatureDamage"),
    T.DAMAGE_ALL_ENEMIES_MULTIPLE: _b(p.damage_all_enemies_multiple, "amount", "applications"),
    T.KILL_ENEMY_TOKENS_EFFECT: _b(p.kill_enemy_tokens_effect),
    T.HEAL_AND_SELECT_TARGET_FOR_DAMAGE: _b(p.heal_and_select_target_for_damage, "healAmount", "damageAmount"),
    T.NEGATE_AND_ALLOW_REPLAY: _b(p.negate_and_allow_replay),
    T.PLAY_SPELLS_FROM_HAND: _b(p.play_spells_from_hand, "count"),

    # Arachnid web
    T.WEB_ALL_ENEMIES: _b(p.web_all_enemies),
    T.WEB_ATTACKER: _b(p.web_attacker),
    T.WEB_TARGET: _b(p.web_target),
    T.WEB_RANDOM_ENEMY: _b(p.web_random_enemy),
    T.DAMAGE_WEBBED: _b(p.damage_webbed, "damage"),
    T.DRAW_PER_WEBBED: _b(p.draw_per_webbed),
    T.HEAL_PER_WEBBED: _b(p.heal_per_webbed, "healPerWebbed"),
    T.DRAW_IF_ENEMY_WEBBED: _b(p.draw_if_enemy_webbed),
    T.BUFF_ATK_PER_WEBBED: _b(p.buff_atk_per_webbed, "bonus"),
    T.SUMMON_TOKENS_PER_WEBBED: _b(p.summon_tokens_per_webbed, "tokenId"),

    # Feline stalk and pride
    T.ENTER_STALK_MODE: _b(p.enter_stalk_mode),
    T.ENTER_STALK_MODE_ON_PLAY: _b(p.enter_stalk_mode_on_play),
    T.DRAW_PER_STALKING: _b(p.draw_per_stalking),
    T.BUFF_ALL_STALKING: _b(p.buff_all_stalking, "bonus"),
    T.DRAW_PER_PRIDE: _b(p.draw_per_pride),
    T.BUFF_ALL_PRIDE: _b(p.buff_all_pride, "bonus"),
    T.SUMMON_TOKENS_PER_PRIDE: _b(p.summon_tokens_per_pride, "tokenId"),
    T.HEAL_PER_PRIDE: _b(p.heal_per_pride, "healPer"),
    T.GRANT_PRIDE: _b(p.grant_pride),
    T.DAMAGE_EQUAL_TO_STALK_BONUS: _b(p.damage_equal_to_stalk_bonus),
    T.CHASE_PREY: _b(p.chase_prey, "atkBonus"),

    # Crustacean shell and molt
    T.DRAW_PER_SHELL: _b(p.draw_per_shell),
    T.BUFF_ALL_SHELL: _b(p.buff_all_shell, "bonus"),
    T.HEAL_PER_SHELL: _b(p.heal_per_shell, "healPer"),
    T.REGENERATE_ALL_SHELLS: _b(p.regenerate_all_shells),
    T.GRANT_SHELL: _b(p.grant_shell, "shellLevel"),
    T.GRANT_MOLT: _b(p.grant_molt),
    T.DRAW_PER_MOLT: _b(p.draw_per_molt),
    T.BUFF_ALL_MOLT: _b(p.buff_all_molt, "bonus"),
    T.SUMMON_TOKENS_PER_SHELL: _b(p.summon_tokens_per_shell, "tokenId"),
    T.DAMAGE_EQUAL_TO_TOTAL_SHELL: _b(p.damage_equal_to_total_shell),
    T.BUFF_HP_PER_SHELL: _b(p.buff_hp_per_shell),

    # Mammal and misc
    T.SELECT_ENEMY_TO_FREEZE: _b(p.select_enemy_to_freeze),
    T.FREEZE_ALL_ENEMIES: _b(p.freeze_all_enemies),
    T.REMOVE_FROZEN_FROM_FRIENDLIES: _b(p.remove_frozen_from_friendlies),
    T.SELECT_CREATURE_FROM_DECK_WITH_KEYWORD: _b(p.select_creature_from_deck_with_keyword, "keyword"),
    T.RETURN_TARGETED_TO_HAND: _b(p.return_targeted_to_hand),
    T.SELECT_FRIENDLY_CREATURE_TO_SACRIFICE: _b(p.select_friendly_creature_to_sacrifice),
    T.REVIVE_CREATURE: _b(p.revive_creature),
    T.REGEN_SELF: _b(p.regen_self),
    T.SELECT_ENEMY_TO_RETURN: _b(p.select_enemy_to_return),
    T.DISCARD_DRAW_AND_KILL_ENEMY: _b(p.discard_draw_and_kill_enemy),
    T.DRAW_THEN_DISCARD: _b(p.draw_then_discard, "drawCount", "discardCount"),
    T.FORCE_OPPONENT_DISCARD: _b(p.force_opponent_discard, "count"),
    T.DRAW_AND_REVEAL_HAND: _b(p.draw_and_reveal_hand, "drawCount"),
    T.TUTOR_AND_PLAY_SPELL: _b(p.tutor_and_play_spell),
    T.DAMAGE_ALL_AND_FREEZE_ALL: _b(p.damage_all_and_freeze_all, "damage"),
    T.END_TURN: _b(p.end_turn),
    T.REGEN_OTHER_CREATURES: _b(p.regen_other_creatures),
    T.PLAY_SPELL_FROM_HAND: _b(p.play_spell_from_hand),
    T.SELECT_ENEMY_TO_RETURN_TO_OPPONENT_HAND: _b(p.select_enemy_to_return_to_opponent_hand),
    T.DRAW_AND_EMPOWER_PREDATOR: _b(p.draw_and_empower_predator, "drawCount", "tokenId"),
    T.TRACK_ATTACK_FOR_REGEN_HEAL: _b(p.track_attack_for_regen_heal, "healAmount"),
    T.DEAL_DAMAGE_TO_ATTACKER: _b(p.deal_damage_to_attacker, "damage"),
    T.APPLY_NEUROTOXIC_TO_ATTACKER: _b(p.apply_neurotoxic_to_attacker),
    T.FREEZE_ATTACKER: _b(p.freeze_attacker),
    T.DAMAGE_ENEMIES_AFTER_COMBAT: _b(p.damage_enemies_after_combat, "damage"),
    T.EAT_PREY_INSTEAD_OF_ATTACKING: _b(p.eat_prey_instead_of_attacking),
}

def build_default_registry() -> EffectRegistry:
    """A registry with every built-in effect type bound."""
    return EffectRegistry(DEFAULT_BINDINGS, DEFAULT_CONDITIONS)
