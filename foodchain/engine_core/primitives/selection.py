"""
Interactive primitives with fixed candidate rules.

Every enemy candidate pool goes through targetable_enemies, so the
Invisible/Acuity and Lure rules apply uniformly. A selected creature
may answer with its own targeted response, which replaces the result.
"""

from __future__ import annotations
from typing import Any

from ...spec_schema.effect_dsl import Stats
from ..chain import merge_results
from ..context import EffectContext, EffectResult, Primitive, TargetRef
from ..keywords import Keyword, has_lure
from ..state import Card, is_creature_card, is_predator, is_prey, is_spell
from ..targeting import targetable_enemies, targetable_friendlies
from .basic import coerce_params
from .common import (
    card_candidates,
    creature_candidate,
    friendly_creatures,
    make_targeted_selection,
    mixed_creature_targets,
    player_candidate,
    plural,
    resolve_dynamic_count,
    respond_or,
    handle_targeted_response,
    sort_cards_for_selection,
)


def _hand_filter(card_type: str | None):
    if card_type == "prey":
        return is_prey
    if card_type == "predator":
        return is_predator
    if card_type == "spell":
        return is_spell
    return lambda card: True


def _rival_label(context: EffectContext) -> str:
    name = context.opponent.name if context.opponent is not None else ""
    return f"Rival ({name or 'Rival'})"


# =============================================================================
# Generic selection
# =============================================================================

def select_target(selection_type: str, effect: Primitive) -> Primitive:
    """
    Pick a creature, then run effect with it as the context target.

    selection_type: friendly, enemy or any.
    """
    def primitive(context: EffectContext) -> EffectResult:
        if selection_type == "friendly":
            targets = friendly_creatures(context)
        elif selection_type == "enemy":
            targets = targetable_enemies(context)
        elif selection_type == "any":
            targets = mixed_creature_targets(context)
        else:
            targets = []

        if not targets:
            context.log("No valid targets.")
            return {}

        def on_select(target: Card) -> EffectResult:
            return effect(context.derive(target=target)) or {}

        return make_targeted_selection("Choose a target", card_candidates(targets, context), on_select)
    return primitive


def select_consume(card_type: str = "any", count: int = 1, effect: Primitive | None = None) -> Primitive:
    """Ask the state layer to consume cards from hand; effect runs per consumed card."""
    matches = _hand_filter(card_type)

    def primitive(context: EffectContext) -> EffectResult:
        valid = [c for c in context.player.hand if matches(c)]
        if not valid:
            context.log("No valid cards to consume.")
            return {}
        return {
            "request_consume": {
                "card_type": card_type,
                "count": count,
                "valid_cards": valid,
                "on_consume": effect,
            }
        }
    return primitive


def steal_creature(target_type: str = "target") -> Primitive:
    """Take control of an enemy creature, chosen or ('random') at random."""
    def primitive(context: EffectContext) -> EffectResult:
        targets = targetable_enemies(context)
        if not targets:
            context.log("No creatures to steal.")
            return {}

        def on_select(target: Card) -> EffectResult:
            context.log(f"Steals {target.name}.")
            return {
                "steal_creature": {
                    "creature": target,
                    "from_index": context.opponent_index,
                    "to_index": context.player_index,
                }
            }

        if target_type == "random" and context.state is not None:
            return on_select(targets[context.state.random_int(len(targets))])
        return make_targeted_selection("Choose a creature to steal", card_candidates(targets, context), on_select)
    return primitive


# =============================================================================
# Hand and deck
# =============================================================================

def select_card_to_discard(count: int = 1) -> Primitive:
    def primitive(context: EffectContext) -> EffectResult:
        if not context.player.hand:
            context.log("No cards in hand to discard.")
            return {}

        def on_select(card: Card) -> EffectResult:
            return {"discard_cards": {"player_index": context.player_index, "cards": [card]}}

        return make_targeted_selection(
            f"Choose {plural(count, 'card')} to discard",
            card_candidates(context.player.hand, context),
            on_select,
            render_cards=True,
        )
    return primitive


def select_and_discard(count: int = 1) -> Primitive:
    """Discard from hand, never the card currently being played."""
    def primitive(context: EffectContext) -> EffectResult:
        discardable = [c for c in context.player.hand if c is not context.played_card]
        if not discardable:
            context.log("No cards available to discard.")
            return {}

        def on_select(card: Card) -> EffectResult:
            context.log(f"Discards {card.name}.")
            return {"discard_cards": {"player_index": context.player_index, "cards": [card]}}

        return make_targeted_selection(
            f"Choose {plural(count, 'card')} to discard",
            card_candidates(discardable, context, with_card=True),
            on_select,
            render_cards=True,
        )
    return primitive


def force_opponent_discard(count: int = 1) -> Primitive:
    """
    The rival picks a card from their own hand to discard.

    In a trap context the rival is the player opposite defender_index.
    A rival holding a single card discards it without a prompt.
    """
    def primitive(context: EffectContext) -> EffectResult:
        if context.defender_index is not None:
            rival_index = (context.defender_index + 1) % 2
            rival = context.state.get_player(rival_index) if context.state is not None else None
        else:
            rival_index, rival = context.opponent_index, context.opponent

        if rival is None or not rival.hand:
            context.log("Rival has no cards to discard.")
            return {}

        def on_select(card: Card) -> EffectResult:
            context.log(f"Rival discards {card.name}.")
            return {"discard_cards": {"player_index": rival_index, "cards": [card]}}

        return make_targeted_selection(
            f"Choose {plural(count, 'card')} to discard",
            card_candidates(rival.hand, context, with_card=True),
            on_select,
            render_cards=True,
            is_opponent_selection=True,
            selecting_player_index=rival_index,
        )
    return primitive


def tutor_from_deck(card_type: str = "any") -> Primitive:
    """Search the deck for a card; candidates are shown sorted, never in deck order."""
    matches = _hand_filter(card_type)

    def primitive(context: EffectContext) -> EffectResult:
        deck = context.player.deck
        if not deck:
            context.log("Deck is empty.")
            return {}
        valid = [c for c in deck if matches(c)]
        if not valid:
            context.log("No valid cards in deck.")
            return {}

        def on_select(card: Card) -> EffectResult:
            return {"add_to_hand": {"player_index": context.player_index, "card": card, "from_deck": True}}

        if len(valid) == 1:
            return on_select(valid[0])
        return make_targeted_selection(
            "Choose a card to add to hand",
            lambda: card_candidates(sort_cards_for_selection(valid)),
            on_select,
            render_cards=True,
        )
    return primitive


def select_creature_from_deck_with_keyword(keyword: str) -> Primitive:
    """Play a creature straight from the deck; it enters with keyword."""
    def primitive(context: EffectContext) -> EffectResult:
        creatures = [c for c in context.player.deck if is_creature_card(c)]
        if not creatures:
            context.log("No creatures in deck.")
            return {}

        def on_select(card: Card) -> EffectResult:
            return {
                "play_from_deck": {
                    "player_index": context.player_index,
                    "card": card,
                    "grant_keyword": keyword,
                }
            }

        return make_targeted_selection(
            f"Choose a creature to play (gains {keyword})",
            card_candidates(sort_cards_for_selection(creatures), with_card=True),
            on_select,
            render_cards=True,
        )
    return primitive


def _hand_spells(context: EffectContext, chosen: list[Card]) -> list[Card]:
    return [c for c in context.player.hand if is_spell(c) and all(c is not p for p in chosen)]


def play_spells_from_hand(count: int = 2) -> Primitive:
    """Play up to count spells from hand, one prompt per spell."""
    ordinals = ("first", "second", "third", "fourth", "fifth")

    def primitive(context: EffectContext) -> EffectResult:
        spells = _hand_spells(context, [])
        if not spells:
            context.log("No spells to play.")
            return {}

        def prompt_for(step: int, chosen: list[Card]) -> EffectResult:
            def on_select(spell: Card) -> EffectResult:
                played = {"play_from_hand": {"player_index": context.player_index, "card": spell}}
                if step + 1 >= count:
                    return played
                picked = chosen + [spell]
                if not _hand_spells(context, picked):
                    context.log("Only one spell available." if step == 0 else "No more spells to play.")
                    return played
                return merge_results([played, prompt_for(step + 1, picked)])

            ordinal = ordinals[step] if step < len(ordinals) else "next"
            title = f"Choose {ordinal} spell to play" if count > 1 else "Choose spell to play"
            if step == 0:
                candidates = card_candidates(spells, with_card=True)
            else:
                candidates = lambda: card_candidates(_hand_spells(context, chosen), with_card=True)
            return make_targeted_selection(title, candidates, on_select, render_cards=True)

        return prompt_for(0, [])
    return primitive


def play_spell_from_hand() -> Primitive:
    def primitive(context: EffectContext) -> EffectResult:
        spells = _hand_spells(context, [])
        if not spells:
            context.log("No spells in hand to play.")
            return {}

        def on_select(spell: Card) -> EffectResult:
            context.log(f"Playing {spell.name} from hand.")
            return {"play_from_hand": {"player_index": context.player_index, "card": spell}}

        return make_targeted_selection(
            "Choose a spell to play",
            card_candidates(spells, with_card=True),
            on_select,
            render_cards=True,
        )
    return primitive


def tutor_and_play_spell() -> Primitive:
    """Add any card from the deck to hand, then play a spell from hand."""
    def primitive(context: EffectContext) -> EffectResult:
        player = context.player
        if not player.deck:
            context.log("Deck is empty.")
            return {}

        def on_tutor(card: Card) -> EffectResult:
            added = {"add_to_hand": {"player_index": context.player_index, "card": card, "from_deck": True}}
            if not _hand_spells(context, []) and not is_spell(card):
                context.log("No spells to play.")
                return added

            def on_spell(spell: Card) -> EffectResult:
                return {"play_from_hand": {"player_index": context.player_index, "card": spell}}

            # The tutored card reaches the hand only after add_to_hand is applied
            prompt = make_targeted_selection(
                "Choose a spell to play",
                lambda: card_candidates(sort_cards_for_selection(_hand_spells(context, [])), with_card=True),
                on_spell,
                render_cards=True,
            )
            return merge_results([added, prompt])

        return make_targeted_selection(
            "Choose a card from deck to add to hand",
            lambda: card_candidates(sort_cards_for_selection(player.deck), with_card=True),
            on_tutor,
            render_cards=True,
        )
    return primitive


def draw_then_discard(draw_count: int = 1, discard_count: int = 1) -> Primitive:
    """Draw first; discard candidates are read after the draw was applied."""
    def primitive(context: EffectContext) -> EffectResult:
        context.log(f"Draws {draw_count}, then discards {discard_count}.")

        def on_select(card: Card) -> EffectResult:
            return {"discard_cards": {"player_index": context.player_index, "cards": [card]}}

        prompt = make_targeted_selection(
            f"Choose {plural(discard_count, 'card')} to discard",
            lambda: card_candidates(context.player.hand, context, with_card=True),
            on_select,
            render_cards=True,
        )
        return {"draw": draw_count, **prompt}
    return primitive


def discard_draw_and_kill_enemy() -> Primitive:
    """Discard a card, draw one, then kill an enemy creature."""
    def primitive(context: EffectContext) -> EffectResult:
        if not context.player.hand:
            context.log("No cards to discard.")
            return {}

        def on_kill(target: Card) -> EffectResult:
            return respond_or(target, context, {"kill_creature": target})

        def on_discard(card: Card) -> EffectResult:
            done = {"discard_cards": {"player_index": context.player_index, "cards": [card]}, "draw": 1}
            enemies = targetable_enemies(context)
            if not enemies:
                context.log("No Rival's creatures to kill.")
                return done
            prompt = make_targeted_selection(
                "Choose a Rival's creature to kill",
                card_candidates(enemies, context),
                on_kill,
            )
            return merge_results([done, prompt])

        return make_targeted_selection(
            "Choose a card to discard",
            card_candidates(context.player.hand, context, with_card=True),
            on_discard,
            render_cards=True,
        )
    return primitive


# =============================================================================
# Enemy creature picks
# =============================================================================

def _enemy_pick(
    title: str,
    empty_message: str,
    build,
    predicate=None,
    announce: bool = False,
    render_cards: bool = False,
) -> Primitive:
    """Targeted pick over the enemy field; build(target, context) makes the result."""
    def primitive(context: EffectContext) -> EffectResult:
        targets = targetable_enemies(context, predicate)
        if not targets:
            context.log(empty_message)
            return {}

        def on_select(target: Card) -> EffectResult:
            if announce:
                context.log(f"Targets {target.name}.")
            return respond_or(target, context, build(target, context))

        return make_targeted_selection(
            title,
            card_candidates(targets, context, with_card=render_cards),
            on_select,
            render_cards=render_cards,
        )
    return primitive


def select_enemy_to_kill() -> Primitive:
    return _enemy_pick(
        "Choose a Rival's creature to kill",
        "No Rival's creatures to kill.",
        lambda target, ctx: {"kill_targets": [target]},
        announce=True,
    )


def select_enemy_to_freeze() -> Primitive:
    return _enemy_pick(
        "Choose a Rival's creature to freeze",
        "No Rival's creatures to freeze.",
        lambda target, ctx: {"add_keyword": {"creature": target, "keyword": Keyword.FROZEN.value}},
    )


def select_enemy_to_return() -> Primitive:
    return _enemy_pick(
        "Choose a Rival's creature to return to hand",
        "No Rival's creatures to return.",
        lambda target, ctx: {"return_to_hand": {"creatures": [target], "player_index": ctx.opponent_index}},
    )


def select_enemy_to_return_to_opponent_hand() -> Primitive:
    return _enemy_pick(
        "Choose a Rival's creature to return to their hand",
        "No Rival's creatures to return.",
        lambda target, ctx: {"return_to_hand": {"creatures": [target], "player_index": ctx.opponent_index}},
    )


def select_enemy_for_keyword(keyword: str) -> Primitive:
    def build(target: Card, context: EffectContext) -> EffectResult:
        context.log(f"{target.name} gains {keyword}.")
        return {"add_keyword": {"creature": target, "keyword": keyword}}

    return _enemy_pick(
        f"Choose a Rival's creature to gain {keyword}",
        "No Rival's creatures to target.",
        build,
    )


def select_enemy_creature_for_damage(amount: int, label: str = "damage") -> Primitive:
    return _enemy_pick(
        f"Choose a Rival's creature for {amount} {label}",
        "No Rival's creatures to target.",
        lambda target, ctx: {"damage_creature": {"creature": target, "amount": amount, "source_label": label}},
        announce=True,
    )


def select_enemy_prey_to_consume() -> Primitive:
    return _enemy_pick(
        "Choose a Rival's prey to consume",
        "No Rival's prey to consume.",
        lambda target, ctx: {
            "consume_enemy_prey": {
                "predator": ctx.creature,
                "prey": target,
                "opponent_index": ctx.opponent_index,
            }
        },
        predicate=is_prey,
        announce=True,
        render_cards=True,
    )


def eat_prey_instead_of_attacking() -> Primitive:
    """Attack replacement: the source eats an enemy prey."""
    def primitive(context: EffectContext) -> EffectResult:
        prey = targetable_enemies(context, is_prey)
        if not prey:
            context.log("No prey to eat.")
            return {}

        def on_select(target: Card) -> EffectResult:
            response = handle_targeted_response(target, context.creature, context)
            if response and "return_to_hand" in response:
                return response
            context.log(f"{context.creature.name} eats {target.name}.")
            return {
                "eat_creature": {
                    "creature": context.creature,
                    "target": target,
                    "player_index": context.player_index,
                }
            }

        return make_targeted_selection("Choose a Rival's prey to eat", card_candidates(prey, context), on_select)
    return primitive


def damage_rival_and_select_enemy(rival_damage: int, creature_damage: int) -> Primitive:
    def primitive(context: EffectContext) -> EffectResult:
        enemies = targetable_enemies(context)
        if not enemies:
            context.log(f"Deals {rival_damage} damage to rival, but no Rival's creatures to target.")
            return {"damage_opponent": rival_damage}

        def on_select(target: Card) -> EffectResult:
            return respond_or(
                target,
                context,
                {"damage_creature": {"creature": target, "amount": creature_damage, "source_label": "damage"}},
            )

        prompt = make_targeted_selection(
            f"Choose a Rival's creature for {creature_damage} damage",
            card_candidates(enemies, context),
            on_select,
        )
        return merge_results([{"damage_opponent": rival_damage}, prompt])
    return primitive


# =============================================================================
# Any-creature picks
# =============================================================================

def _any_creature_pick(title: str, empty_message: str, build, predicate=None, render_cards: bool = False) -> Primitive:
    def primitive(context: EffectContext) -> EffectResult:
        targets = mixed_creature_targets(context, predicate)
        if not targets:
            context.log(empty_message)
            return {}

        def on_select(target: Card) -> EffectResult:
            context.log(f"Targets {target.name}.")
            return respond_or(target, context, build(target, context))

        return make_targeted_selection(
            title,
            card_candidates(targets, context, with_card=render_cards),
            on_select,
            render_cards=render_cards,
        )
    return primitive


def select_creature_for_damage(amount: Any, label: str = "damage") -> Primitive:
    """Any creature takes amount damage; amount may be a named count."""
    def primitive(context: EffectContext) -> EffectResult:
        resolved = resolve_dynamic_count(amount, context)
        if resolved <= 0:
            context.log(f"No damage to deal (0 {label}).")
            return {}
        return _any_creature_pick(
            f"Choose a target for {resolved} {label}",
            f"No valid targets for {label}.",
            lambda target, ctx: {
                "damage_creature": {"creature": target, "amount": resolved, "source_label": label}
            },
        )(context)
    return primitive


def select_creature_to_restore() -> Primitive:
    return _any_creature_pick(
        "Choose a creature to regenerate",
        "No creatures to restore.",
        lambda target, ctx: {"restore_creature": target},
        render_cards=True,
    )


def select_creature_to_copy() -> Primitive:
    return _any_creature_pick(
        "Choose a creature to copy",
        "No creatures to copy.",
        lambda target, ctx: {"copy_creature": {"target": target, "player_index": ctx.player_index}},
        render_cards=True,
    )


def select_creature_to_transform(new_card_id: str) -> Primitive:
    return _any_creature_pick(
        "Choose a creature to transform",
        "No creatures to transform.",
        lambda target, ctx: {"transform_card": {"card": target, "new_card_data": new_card_id}},
    )


def select_prey_for_buff(stats: Stats | dict | None = None) -> Primitive:
    stats = coerce_params(Stats, stats)
    return _any_creature_pick(
        f"Choose a prey to gain +{stats.attack}/+{stats.health}",
        "No prey creatures to target.",
        lambda target, ctx: {"buff_creature": {"creature": target, "attack": stats.attack, "health": stats.health}},
        predicate=is_prey,
    )


def select_creature_for_buff(stats: Stats | dict | None = None) -> Primitive:
    stats = coerce_params(Stats, stats)
    return _any_creature_pick(
        f"Choose a creature to gain +{stats.attack}/+{stats.health}",
        "No creatures to target.",
        lambda target, ctx: {"buff_creature": {"creature": target, "attack": stats.attack, "health": stats.health}},
    )


def _creature_or_rival_candidates(context: EffectContext):
    """Creature refs plus the rival, unless an enemy Lure forces the pick."""
    enemies = targetable_enemies(context)
    if any(has_lure(c) for c in enemies):
        return [creature_candidate(c, context.opponent_index) for c in enemies]
    return (
        [creature_candidate(c, context.player_index) for c in targetable_friendlies(context)]
        + [creature_candidate(c, context.opponent_index) for c in enemies]
        + [player_candidate(_rival_label(context), context.opponent_index)]
    )


def _damage_selection(ref: TargetRef, amount: int, label: str, context: EffectContext) -> EffectResult:
    if ref.kind == "player":
        context.log(f"Deals {amount} {label} to rival.")
        return {"damage_opponent": amount}
    context.log(f"Targets {ref.creature.name}.")
    return respond_or(
        ref.creature,
        context,
        {"damage_creature": {"creature": ref.creature, "amount": amount, "source_label": label}},
    )


def select_target_for_damage(amount: int, label: str = "damage") -> Primitive:
    """Any creature or the rival."""
    def primitive(context: EffectContext) -> EffectResult:
        return make_targeted_selection(
            f"Choose a target for {amount} {label}",
            _creature_or_rival_candidates(context),
            lambda ref: _damage_selection(ref, amount, label, context),
        )
    return primitive


def heal_and_select_target_for_damage(heal_amount: int, damage_amount: int) -> Primitive:
    def primitive(context: EffectContext) -> EffectResult:
        context.log(f"Heals {heal_amount} HP.")
        prompt = make_targeted_selection(
            f"Choose a target for {damage_amount} damage",
            _creature_or_rival_candidates(context),
            lambda ref: _damage_selection(ref, damage_amount, "damage", context),
        )
        return merge_results([{"heal": heal_amount}, prompt])
    return primitive


# =============================================================================
# Friendly picks
# =============================================================================

def select_predator_for_end_effect(token_id: str) -> Primitive:
    """Give a friendly predator 'end of turn: play token_id'."""
    def primitive(context: EffectContext) -> EffectResult:
        predators = [c for c in friendly_creatures(context) if is_predator(c)]
        if not predators:
            context.log("No predators on field to empower.")
            return {}

        def on_select(target: Card) -> EffectResult:
            context.log(f"{target.name} gains: End of turn, play token.")
            return {"empower_with_end_effect": {"creature": target, "token_id": token_id}}

        return make_targeted_selection(
            "Choose a predator to empower",
            card_candidates(predators, with_card=True),
            on_select,
            render_cards=True,
        )
    return primitive


def draw_and_empower_predator(draw_count: int, token_id: str) -> Primitive:
    def primitive(context: EffectContext) -> EffectResult:
        if not any(is_predator(c) for c in friendly_creatures(context)):
            context.log(f"Drawing {draw_count}. No predators to empower.")
            return {"draw": draw_count}
        context.log(f"Drawing {draw_count}.")
        return merge_results([{"draw": draw_count}, select_predator_for_end_effect(token_id)(context)])
    return primitive


def select_friendly_creature_to_sacrifice() -> Primitive:
    def primitive(context: EffectContext) -> EffectResult:
        creatures = friendly_creatures(context)
        if not creatures:
            context.log("No creatures to sacrifice.")
            return {}
        return make_targeted_selection(
            "Choose a creature to sacrifice",
            card_candidates(creatures, with_card=True),
            lambda target: {"kill_creature": target},
            render_cards=True,
        )
    return primitive
