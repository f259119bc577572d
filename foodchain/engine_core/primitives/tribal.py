"""
Tribal mechanics: Arachnid web, Feline stalk and pride, Crustacean shell and molt.

Statuses are never written onto cards here. Granting Webbed, Pride,
Molt, Haste or a shell, and entering stalking mode, are returned as
descriptors for the state layer to apply.

Effects that draw per matching creature are capped at
EngineSettings.max_scaled_draw.
"""

from __future__ import annotations
from typing import Callable

from ..context import EffectContext, EffectResult, Primitive
from ..keywords import (
    Keyword,
    has_molt,
    has_pride,
    has_shell,
    has_stalk,
    is_invisible,
    is_stalking,
    is_webbed,
)
from ..state import Card
from ..targeting import targetable_enemies
from .common import card_candidates, enemy_creatures, friendly_creatures, make_targeted_selection
from .traps import fresh_attacker


def _friendly_with(context: EffectContext, predicate: Callable[[Card], bool]) -> list[Card]:
    return [c for c in friendly_creatures(context) if predicate(c)]


def _webbed_enemies(context: EffectContext) -> list[Card]:
    return [c for c in enemy_creatures(context) if is_webbed(c)]


def _capped_draw(count: int, context: EffectContext) -> int:
    return min(count, context.settings.max_scaled_draw)


def _web(creature: Card, context: EffectContext) -> EffectResult:
    if is_webbed(creature):
        return {}
    context.log(f"{creature.name} is trapped in a web!")
    return {"add_keyword": {"creature": creature, "keyword": Keyword.WEBBED.value}}


# =============================================================================
# Web
# =============================================================================

def web_all_enemies() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        enemies = enemy_creatures(context)
        if not enemies:
            context.log("No Rival's creatures to web.")
            return {}
        fresh = [c for c in enemies if not is_webbed(c)]
        if not fresh:
            return {}
        for creature in fresh:
            context.log(f"{creature.name} is trapped in a web!")
        return {"grant_keyword_to_all": {"creatures": fresh, "keyword": Keyword.WEBBED.value}}
    return effect


def web_attacker() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        attacker = fresh_attacker(context)
        if attacker is None:
            return {}
        return _web(attacker, context)
    return effect


def web_target() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        enemies = targetable_enemies(context)
        if not enemies:
            context.log("No Rival's creatures to web.")
            return {}
        return make_targeted_selection(
            "Choose a creature to trap in web",
            card_candidates(enemies, context),
            lambda target: _web(target, context),
        )
    return effect


def web_random_enemy() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        enemies = enemy_creatures(context)
        if not enemies:
            context.log("No Rival's creatures to web.")
            return {}
        index = context.state.random_int(len(enemies)) if context.state is not None else 0
        return _web(enemies[index], context)
    return effect


def damage_webbed(damage: int) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        webbed = _webbed_enemies(context)
        if not webbed:
            context.log("No Webbed creatures to damage.")
            return {}
        context.log(f"Deals {damage} damage to all Webbed creatures.")
        return {"damage_creatures": {"creatures": webbed, "amount": damage, "source_label": "damage"}}
    return effect


def draw_per_webbed() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        count = len(_webbed_enemies(context))
        if count == 0:
            context.log("No Webbed creatures - no cards drawn.")
            return {}
        draw = _capped_draw(count, context)
        context.log(f"Drawing {draw} card(s) for Webbed enemies.")
        return {"draw": draw}
    return effect


def heal_per_webbed(heal_per_webbed: int = 1) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        count = len(_webbed_enemies(context))
        if count == 0:
            context.log("No Webbed creatures - no healing.")
            return {}
        total = count * heal_per_webbed
        context.log(f"Healing {total} HP for {count} Webbed enemy creature(s).")
        return {"heal": total}
    return effect


def draw_if_enemy_webbed() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        if not _webbed_enemies(context):
            context.log("No Webbed enemies - no card drawn.")
            return {}
        context.log("Enemy creature is Webbed - drawing a card!")
        return {"draw": 1}
    return effect


def buff_atk_per_webbed(bonus: int = 1) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        count = len(_webbed_enemies(context))
        if count == 0:
            context.log("No Webbed enemies - no ATK bonus.")
            return {}
        if context.creature is None:
            return {}
        total = count * bonus
        context.log(f"Gains +{total} ATK from {count} Webbed enemy creature(s)!")
        return {"buff_creature": {"creature": context.creature, "attack": total, "health": 0}}
    return effect


def summon_tokens_per_webbed(token_id: str) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        count = len(_webbed_enemies(context))
        if count == 0:
            context.log("No Webbed enemies - no tokens summoned.")
            return {}
        context.log(f"Summons {count} token(s) from {count} Webbed enemy creature(s)!")
        return {"summon_tokens": {"player_index": context.player_index, "tokens": [token_id] * count}}
    return effect


# =============================================================================
# Stalk and pride
# =============================================================================

def _enter_stalking(creature: Card, context: EffectContext) -> EffectResult:
    context.log(f"{creature.name} enters stalking mode! (Gains Hidden, builds +1 ATK/turn)")
    return {"enter_stalking": creature}


def enter_stalk_mode() -> Primitive:
    """Pick a friendly Stalk creature that is not stalking yet."""
    def effect(context: EffectContext) -> EffectResult:
        stalkers = _friendly_with(context, lambda c: has_stalk(c) and not is_stalking(c))
        if not stalkers:
            context.log("No creatures with Stalk available to enter stalking mode.")
            return {}
        return make_targeted_selection(
            "Choose a creature to enter stalking mode",
            card_candidates(stalkers, context),
            lambda target: _enter_stalking(target, context),
        )
    return effect


def enter_stalk_mode_on_play() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        creature = context.creature
        if creature is None or not has_stalk(creature) or is_stalking(creature):
            return {}
        return _enter_stalking(creature, context)
    return effect


def _scaled_draw(predicate: Callable[[Card], bool], noun: str) -> Callable[[], Primitive]:
    def factory() -> Primitive:
        def effect(context: EffectContext) -> EffectResult:
            count = len(_friendly_with(context, predicate))
            if count == 0:
                context.log(f"No {noun} creatures - no cards drawn.")
                return {}
            draw = _capped_draw(count, context)
            context.log(f"Drawing {draw} card(s) for {noun} creatures.")
            return {"draw": draw}
        return effect
    return factory


def _buff_all(predicate: Callable[[Card], bool], noun: str) -> Callable[..., Primitive]:
    def factory(bonus: int = 1) -> Primitive:
        def effect(context: EffectContext) -> EffectResult:
            creatures = _friendly_with(context, predicate)
            if not creatures:
                context.log(f"No {noun} creatures to buff.")
                return {}
            context.log(f"All {noun} creatures gain +{bonus} ATK!")
            return {"buff_creatures": {"creatures": creatures, "attack": bonus, "health": 0}}
        return effect
    return factory


def _heal_per(predicate: Callable[[Card], bool], noun: str) -> Callable[..., Primitive]:
    def factory(heal_per: int = 1) -> Primitive:
        def effect(context: EffectContext) -> EffectResult:
            count = len(_friendly_with(context, predicate))
            if count == 0:
                context.log(f"No {noun} creatures - no healing.")
                return {}
            total = count * heal_per
            context.log(f"Heals {total} HP for {count} {noun} creature(s)!")
            return {"heal": total}
        return effect
    return factory


def _tokens_per(predicate: Callable[[Card], bool], noun: str) -> Callable[[str], Primitive]:
    def factory(token_id: str) -> Primitive:
        def effect(context: EffectContext) -> EffectResult:
            count = len(_friendly_with(context, predicate))
            if count == 0:
                context.log(f"No {noun} creatures - no tokens summoned.")
                return {}
            context.log(f"Summons {count} token(s) for {count} {noun} creature(s)!")
            return {"summon_tokens": {"player_index": context.player_index, "tokens": [token_id] * count}}
        return effect
    return factory


draw_per_stalking = _scaled_draw(is_stalking, "stalking")
buff_all_stalking = _buff_all(is_stalking, "stalking")

draw_per_pride = _scaled_draw(has_pride, "Pride")
buff_all_pride = _buff_all(has_pride, "Pride")
heal_per_pride = _heal_per(has_pride, "Pride")
summon_tokens_per_pride = _tokens_per(has_pride, "Pride")


def grant_pride() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        eligible = _friendly_with(context, lambda c: not has_pride(c) and not is_invisible(c, context.state))
        if not eligible:
            context.log("No creatures available to join the pride.")
            return {}

        def on_select(target: Card) -> EffectResult:
            context.log(f"{target.name} joins the Pride!")
            return {"add_keyword": {"creature": target, "keyword": Keyword.PRIDE.value}}

        return make_targeted_selection("Choose a creature to join the Pride", card_candidates(eligible, context), on_select)
    return effect


def damage_equal_to_stalk_bonus() -> Primitive:
    """Strike an enemy for the source's accumulated stalk bonus."""
    def effect(context: EffectContext) -> EffectResult:
        bonus = context.creature.stalk_bonus if context.creature is not None else 0
        if not bonus:
            context.log("No stalk bonus accumulated - no damage dealt.")
            return {}
        enemies = targetable_enemies(context)
        if not enemies:
            context.log("No enemy creatures to strike.")
            return {}

        def on_select(target: Card) -> EffectResult:
            context.log(f"Precision strike! Deals {bonus} damage to {target.name}!")
            return {"damage_creature": {"creature": target, "amount": bonus, "source_label": "strike"}}

        return make_targeted_selection(
            f"Deal {bonus} damage to target (from stalk bonus)",
            card_candidates(enemies, context),
            on_select,
        )
    return effect


def chase_prey(atk_bonus: int = 2) -> Primitive:
    """A friendly creature gains ATK and Haste."""
    def effect(context: EffectContext) -> EffectResult:
        friendlies = _friendly_with(context, lambda c: not is_invisible(c, context.state))
        if not friendlies:
            context.log("No friendly creatures to empower.")
            return {}

        def on_select(target: Card) -> EffectResult:
            context.log(f"{target.name} gives chase! Gains +{atk_bonus} ATK and Haste!")
            return {
                "buff_creature": {"creature": target, "attack": atk_bonus, "health": 0},
                "add_keyword": {"creature": target, "keyword": Keyword.HASTE.value},
            }

        return make_targeted_selection("Choose a creature to give the chase", card_candidates(friendlies, context), on_select)
    return effect


# =============================================================================
# Shell and molt
# =============================================================================

draw_per_shell = _scaled_draw(has_shell, "Shell")
buff_all_shell = _buff_all(has_shell, "Shell")
heal_per_shell = _heal_per(has_shell, "Shell")
summon_tokens_per_shell = _tokens_per(has_shell, "Shell")

draw_per_molt = _scaled_draw(has_molt, "Molt")
buff_all_molt = _buff_all(has_molt, "Molt")


def regenerate_all_shells() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        shelled = _friendly_with(context, has_shell)
        if not shelled:
            context.log("No Shell creatures to regenerate.")
            return {}
        depleted = [c for c in shelled if c.current_shell < c.shell_level]
        context.log(f"Regenerated shell on {len(depleted)} creature(s)!")
        if not depleted:
            return {}
        return {"regenerate_shells": depleted}
    return effect


def grant_shell(shell_level: int = 1) -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        eligible = _friendly_with(context, lambda c: not has_shell(c) and not is_invisible(c, context.state))
        if not eligible:
            context.log("No creatures available to grant Shell.")
            return {}

        def on_select(target: Card) -> EffectResult:
            context.log(f"{target.name} grows a protective shell! (Shell {shell_level})")
            return {"grant_shell": {"creature": target, "shell_level": shell_level}}

        return make_targeted_selection("Choose a creature to grant Shell", card_candidates(eligible, context), on_select)
    return effect


def grant_molt() -> Primitive:
    def effect(context: EffectContext) -> EffectResult:
        eligible = _friendly_with(context, lambda c: not has_molt(c) and not is_invisible(c, context.state))
        if not eligible:
            context.log("No creatures available to grant Molt.")
            return {}

        def on_select(target: Card) -> EffectResult:
            context.log(f"{target.name} can now molt to survive death!")
            return {"add_keyword": {"creature": target, "keyword": Keyword.MOLT.value}}

        return make_targeted_selection("Choose a creature to grant Molt", card_candidates(eligible, context), on_select)
    return effect


def damage_equal_to_total_shell() -> Primitive:
    """Damage an enemy by the summed shell level of friendly Shell creatures."""
    def effect(context: EffectContext) -> EffectResult:
        total = sum(c.shell_level for c in _friendly_with(context, has_shell))
        if total == 0:
            context.log("No shell level accumulated - no damage dealt.")
            return {}
        enemies = targetable_enemies(context)
        if not enemies:
            context.log("No enemy creatures to damage.")
            return {}

        def on_select(target: Card) -> EffectResult:
            context.log(f"Deals {total} damage (total Shell level) to {target.name}!")
            return {"damage_creature": {"creature": target, "amount": total, "source_label": "damage"}}

        return make_targeted_selection(
            f"Deal {total} damage (total Shell) to an enemy",
            card_candidates(enemies, context, label=lambda c: f"{c.name} ({c.current_hp} HP)"),
            on_select,
        )
    return effect


def buff_hp_per_shell() -> Primitive:
    """Every friendly creature gains +1 HP per friendly Shell creature."""
    def effect(context: EffectContext) -> EffectResult:
        count = len(_friendly_with(context, has_shell))
        if count == 0:
            context.log("No Shell creatures - no HP buff.")
            return {}
        context.log(f"All creatures gain +{count} HP!")
        return {"buff_creatures": {"creatures": friendly_creatures(context), "attack": 0, "health": count}}
    return effect
