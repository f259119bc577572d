"""
Flexible selection: named target groups, option bubbles and inline choices.

- build_target_candidates: candidates for a TargetGroup name
- select_from_group: pick from a group, then apply a declarative effect
- choose_option / choice: pick one of several effects
"""

from __future__ import annotations
from typing import Any, Callable
import logging

from ...spec_schema.effect_dsl import (
    ChoiceParams,
    ChooseOptionParams,
    GroupEffect,
    SelectFromGroupParams,
    TargetGroup,
)
from ..context import Candidate, EffectContext, EffectResult, Option, Primitive, SelectOption, TargetRef
from ..keywords import has_lure
from ..state import Card, is_predator, is_prey
from ..targeting import targetable_enemies
from .basic import coerce_params
from .common import (
    creature_candidate,
    friendly_creatures,
    handle_targeted_response,
    make_targeted_selection,
    player_candidate,
    plural,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Target groups
# =============================================================================

def _pile_candidates(cards: list[Card], kind: str, owner_index: int | None) -> list[Candidate]:
    """Candidates for cards outside the field (hand or carrion)."""
    return [
        Candidate(label=c.name, value=TargetRef(kind=kind, card=c, owner_index=owner_index), card=c)
        for c in cards
        if c is not None
    ]


def build_target_candidates(target_group: str | TargetGroup, context: EffectContext) -> list[Candidate]:
    """
    Candidates for a named target group.

    Enemy creatures follow the ability targeting rules. In a group that
    mixes enemy creatures with anything else, an enemy Lure creature
    leaves only the enemy Lure creatures. Unknown groups yield no
    candidates.
    """
    try:
        group = TargetGroup(target_group)
    except ValueError:
        logger.warning("Unknown target group: %r", target_group)
        return []

    player, opponent = context.player, context.opponent
    me, rival = context.player_index, context.opponent_index
    my_label = player.name if player is not None and player.name else "Self"
    rival_label = opponent.name if opponent is not None and opponent.name else "Rival"

    def friendly(predicate: Callable[[Card], bool] | None = None, exclude: Card | None = None) -> list[Candidate]:
        return [
            creature_candidate(c, me)
            for c in friendly_creatures(context, exclude=exclude)
            if predicate is None or predicate(c)
        ]

    def enemy_cards(predicate: Callable[[Card], bool] | None = None, exclude: Card | None = None) -> list[Card]:
        return targetable_enemies(
            context, lambda c: c is not exclude and (predicate is None or predicate(c))
        )

    def enemy(cards: list[Card]) -> list[Candidate]:
        return [creature_candidate(c, rival) for c in cards]

    def mixed(enemies: list[Card], *others: list[Candidate]) -> list[Candidate]:
        if any(has_lure(c) for c in enemies):
            return enemy(enemies)
        merged: list[Candidate] = []
        for part in others:
            merged.extend(part)
        return merged + enemy(enemies)

    if group is TargetGroup.FRIENDLY_CREATURES:
        return friendly()
    if group is TargetGroup.ENEMY_CREATURES:
        return enemy(enemy_cards())
    if group is TargetGroup.ALL_CREATURES:
        return mixed(enemy_cards(), friendly())
    if group is TargetGroup.FRIENDLY_ENTITIES:
        return [player_candidate(my_label, me)] + friendly()
    if group is TargetGroup.ENEMY_ENTITIES:
        return mixed(enemy_cards(), [player_candidate(rival_label, rival)])
    if group is TargetGroup.ALL_ENTITIES:
        return mixed(
            enemy_cards(),
            [player_candidate(my_label, me), player_candidate(rival_label, rival)],
            friendly(),
        )
    if group is TargetGroup.RIVAL:
        return [player_candidate(rival_label, rival)]
    if group is TargetGroup.SELF:
        return [player_candidate(my_label, me)]
    if group is TargetGroup.ENEMY_PREY:
        return enemy(enemy_cards(is_prey))
    if group is TargetGroup.FRIENDLY_PREY:
        return friendly(is_prey)
    if group is TargetGroup.ALL_PREY:
        return mixed(enemy_cards(is_prey), friendly(is_prey))
    if group is TargetGroup.FRIENDLY_PREDATORS:
        return friendly(is_predator)
    if group is TargetGroup.OTHER_CREATURES:
        source = context.creature
        return mixed(enemy_cards(exclude=source), friendly(exclude=source))
    if group is TargetGroup.HAND_PREY:
        return _pile_candidates([c for c in player.hand if is_prey(c)], "hand", me)
    if group is TargetGroup.CARRION_PREDATORS:
        return _pile_candidates([c for c in player.carrion if is_predator(c)], "carrion", me)
    if group is TargetGroup.CARRION:
        own = _pile_candidates(player.carrion, "carrion", me)
        theirs = _pile_candidates(opponent.carrion, "carrion", rival) if opponent is not None else []
        return own + theirs
    if group is TargetGroup.FRIENDLY_CARRION:
        return _pile_candidates(player.carrion, "carrion", me)
    return []


# =============================================================================
# Applying a group effect
# =============================================================================

def apply_effect_to_selection(
    selection: TargetRef,
    effect: GroupEffect | dict[str, Any],
    context: EffectContext,
) -> EffectResult:
    """
    Apply a declarative group effect to a selection.

    Shortcut keys accumulate into one result (buff plus keyword, for
    instance). Only when none applies is a nested type/params
    definition resolved, with the selection as target.
    """
    effect = coerce_params(GroupEffect, effect)
    log = context.log
    result: EffectResult = {}
    kind = selection.kind
    creature = selection.creature if kind == "creature" else None
    card = selection.subject

    if effect.damage:
        if creature is not None:
            log(f"Deals {effect.damage} damage to {creature.name}.")
            result["damage_creature"] = {
                "creature": creature,
                "amount": effect.damage,
                "source_label": effect.label or "damage",
            }
        elif kind == "player":
            log(f"Deals {effect.damage} damage to rival.")
            result["damage_opponent"] = effect.damage

    if effect.heal:
        if creature is not None:
            log(f"Restores {effect.heal} HP to {creature.name}.")
            result["heal_creature"] = {"creature": creature, "amount": effect.heal}
        elif kind == "player":
            log(f"Heals {effect.heal} HP.")
            result["heal"] = effect.heal

    if creature is not None:
        if effect.kill:
            log(f"{creature.name} is destroyed.")
            result["kill_creature"] = creature
        if effect.buff is not None:
            log(f"{creature.name} gains +{effect.buff.attack}/+{effect.buff.health}.")
            result["buff_creature"] = {
                "creature": creature,
                "attack": effect.buff.attack,
                "health": effect.buff.health,
            }
        if effect.keyword:
            log(f"{creature.name} gains {effect.keyword}.")
            result["add_keyword"] = {"creature": creature, "keyword": effect.keyword}
        if effect.regen:
            log(f"{creature.name} regenerates.")
            result["regen_creature"] = creature
        if effect.consume:
            log(f"{creature.name} is consumed.")
            if selection.owner_index != context.player_index:
                result["consume_enemy_prey"] = {
                    "predator": context.creature,
                    "prey": creature,
                    "opponent_index": selection.owner_index,
                }
            else:
                result["consume_creature"] = creature
        if effect.remove_abilities:
            log(f"{creature.name} loses abilities.")
            result["remove_abilities"] = creature
        if effect.steal:
            log(f"Takes control of {creature.name}.")
            result["steal_creature"] = {
                "creature": creature,
                "from_index": selection.owner_index,
                "to_index": context.player_index,
            }
        if effect.copy_stats:
            log(f"Copies {creature.name}'s stats.")
            result["copy_stats"] = {"target": context.creature, "source": creature}
        if effect.copy_abilities_from:
            log(f"Copies abilities from {creature.name}.")
            result["copy_abilities"] = {"target": context.creature, "source": creature}
        if effect.paralyze:
            log(f"{creature.name} is paralyzed.")
            result["paralyze_creature"] = creature
        if effect.sacrifice:
            log(f"{creature.name} is sacrificed.")
            result["sacrifice_creature"] = creature
            if effect.draw:
                result["draw"] = effect.draw

    if kind == "carrion" and card is not None:
        if effect.copy_abilities:
            log(f"Copies {card.name}'s abilities.")
            result["copy_abilities"] = {"target": context.creature, "source": card}
        if effect.copy_stats:
            log(f"Copies {card.name}'s stats.")
            result["copy_stats"] = {"target": context.creature, "source": card}
        if effect.add_to_hand:
            log(f"Adds {card.name} from carrion to hand.")
            result["add_carrion_to_hand"] = {"player_index": selection.owner_index, "card": card}
        if effect.play:
            suffix = f" with {effect.keyword}" if effect.keyword else ""
            log(f"Plays {card.name} from carrion{suffix}.")
            result["play_from_carrion"] = {
                "card": card,
                "owner_index": selection.owner_index,
                "keyword": effect.keyword,
            }

    if kind == "hand" and card is not None and effect.play:
        log(f"Plays {card.name} from hand.")
        result["play_from_hand"] = {"player_index": context.player_index, "card": card}

    if result:
        return result

    if effect.type:
        nested = context.derive(selected_target=selection, target=creature)
        return nested.resolve(effect.as_definition())

    return {}


def select_from_group(params: SelectFromGroupParams | dict) -> Primitive:
    """Pick one candidate of a target group and apply params.effect to it."""
    params = coerce_params(SelectFromGroupParams, params)

    def primitive(context: EffectContext) -> EffectResult:
        candidates = build_target_candidates(params.target_group, context)
        if not candidates:
            context.log("No valid targets available.")
            return {}

        def on_select(selection: TargetRef) -> EffectResult:
            if selection.kind == "creature":
                response = handle_targeted_response(selection.creature, None, context)
                if response:
                    return response
            return apply_effect_to_selection(selection, params.effect, context)

        return make_targeted_selection(
            params.title or "Choose a target",
            candidates,
            on_select,
            render_cards=params.render_cards and any(c.card is not None for c in candidates),
        )
    return primitive


# =============================================================================
# Options
# =============================================================================

def resolve_option_effect(effect: Any, context: EffectContext) -> EffectResult:
    """
    Resolve an option's effect.

    Shortcut dicts (summonTokens, buff, heal, draw, damage) are turned
    into results directly; typed nodes and lists are resolved; anything
    else is taken to be a result already.
    """
    if not effect:
        return {}
    if isinstance(effect, list):
        return context.resolve(effect)
    if not isinstance(effect, dict):
        return {}

    if effect.get("summonTokens"):
        tokens = effect["summonTokens"]
        tokens = list(tokens) if isinstance(tokens, list) else [tokens]
        context.log(f"Summons {plural(len(tokens), 'token')}.")
        return {"summon_tokens": {"player_index": context.player_index, "tokens": tokens}}

    if effect.get("buff") and context.creature is not None:
        attack = effect["buff"].get("attack", 0)
        health = effect["buff"].get("health", 0)
        context.log(f"{context.creature.name} gains +{attack}/+{health}.")
        return {"buff_creature": {"creature": context.creature, "attack": attack, "health": health}}

    if effect.get("heal"):
        context.log(f"Heals {effect['heal']} HP.")
        return {"heal": effect["heal"]}

    if effect.get("draw"):
        context.log(f"Draws {plural(effect['draw'], 'card')}.")
        return {"draw": effect["draw"]}

    if effect.get("damage"):
        context.log(f"Deals {effect['damage']} damage to rival.")
        return {"damage_opponent": effect["damage"]}

    if effect.get("type"):
        return context.resolve(effect)

    return effect


def choose_option(params: ChooseOptionParams | dict) -> Primitive:
    """Present labelled options; a single option is taken without asking."""
    params = coerce_params(ChooseOptionParams, params)

    def primitive(context: EffectContext) -> EffectResult:
        if not params.options:
            context.log("No options available.")
            return {}
        if len(params.options) == 1:
            only = params.options[0]
            context.log(only.label)
            return resolve_option_effect(only.effect, context)

        def on_select(option: Option) -> EffectResult:
            context.log(f"Chose: {option.label}")
            return resolve_option_effect(option.effect, context)

        options = [
            Option(id=str(index), label=o.label, description=o.description, effect=o.effect)
            for index, o in enumerate(params.options)
        ]
        return {"select_option": SelectOption(params.title or "Choose an option", options, on_select)}
    return primitive


def choice(params: ChoiceParams | dict) -> Primitive:
    """Inline choices, each a {label, type, params} definition."""
    params = coerce_params(ChoiceParams, params)

    def primitive(context: EffectContext) -> EffectResult:
        if not params.choices:
            context.log("No choices available.")
            return {}
        if len(params.choices) == 1:
            only = params.choices[0]
            context.log(only.label)
            return context.resolve({"type": only.type, "params": only.params})

        def on_select(option: Option) -> EffectResult:
            context.log(f"Chose: {option.label}")
            return context.resolve(option.effect)

        options = [
            Option(
                id=str(index),
                label=c.label,
                description=c.description,
                effect={"type": c.type, "params": c.params},
            )
            for index, c in enumerate(params.choices)
        ]
        return {"select_option": SelectOption("Choose an option", options, on_select)}
    return primitive
