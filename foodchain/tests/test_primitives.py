"""
Tests for effect primitives.

Tests:
- Player-level results and log lines
- No-op behaviour when a precondition is missing
- Auto-collapse of single-candidate prompts
- Targeted responses replacing a result
- Group selection, options and tribal scaling
"""

import pytest

from ..config import EngineSettings
from ..engine_core import primitives as p
from ..engine_core.context import Candidate, SelectOption, SelectTarget, TargetRef
from ..engine_core.effect_resolver import EffectResolver
from ..engine_core.keywords import Keyword
from ..engine_core.primitives.common import make_targeted_selection
from ..engine_core.state import CardType
from .conftest import make_card, place


class TestPlayerLevel:
    """Tests for primitives that act on players."""

    def test_heal_ignores_current_hp(self, context, me):
        """heal(5) is a request; clamping belongs to the state layer."""
        me.hp = 10
        assert p.heal(5)(context) == {"heal": 5}
        assert "Heals 5 HP." in context.log

    def test_draw_static(self, context):
        assert p.draw(2)(context) == {"draw": 2}

    def test_draw_named_count(self, context, me):
        me.hand.extend([make_card("A"), make_card("B"), make_card("C")])
        assert p.draw("handCount")(context) == {"draw": 3}

    def test_draw_nothing(self, context):
        assert p.draw("handCount")(context) == {}
        assert "No cards to draw." in context.log

    def test_damage_rival(self, context):
        assert p.damage_rival(2)(context) == {"damage_opponent": 2}

    def test_flags(self, context):
        assert p.negate_attack()(context) == {"negate_attack": True}
        assert p.end_turn()(context) == {"end_turn": True}

    def test_reveal_hand_uses_settings(self, context):
        result = p.reveal_hand()(context)
        assert result == {"reveal_hand": {"player_index": 1, "duration_ms": 3000}}

    def test_summon_single_token_id(self, context):
        result = p.summon_tokens("token-fry")(context)
        assert result == {"summon_tokens": {"player_index": 0, "tokens": ["token-fry"]}}


class TestNoOp:
    """Primitives whose precondition is missing return {}."""

    @pytest.mark.parametrize("primitive", [
        p.kill_creature("self"),
        p.damage_creature("target", 2),
        p.buff_stats("self", {"attack": 1}),
        p.regen_self(),
        p.select_enemy_to_kill(),
        p.select_enemy_to_freeze(),
        p.steal_creature(),
        p.destroy({"target": "enemyCreatures"}),
        p.destroy({"target": "targetEnemy"}),
        p.kill_attacker(),
        p.freeze_attacker(),
        p.web_all_enemies(),
        p.draw_per_pride(),
        p.buff_all_shell(),
        p.select_card_to_discard(),
        p.tutor_from_deck(),
        p.kill_all("all"),
        p.freeze_all_enemies(),
        p.grant_shell(),
        p.select_from_group({"targetGroup": "enemy-prey", "effect": {"kill": True}}),
        p.choose_option({"options": []}),
    ])
    def test_empty_board(self, context, primitive):
        assert primitive(context) == {}

    @pytest.mark.parametrize("target_type", ["all", "everything"])
    def test_kill_all_logs_when_nothing_dies(self, context, target_type):
        assert p.kill_all(target_type)(context) == {}
        assert "No creatures to destroy." in context.log


class TestAutoCollapse:
    """A single concrete candidate resolves as if it had been picked."""

    def test_empty_candidates(self):
        assert make_targeted_selection("Pick", [], lambda v: {"picked": v}) == {}

    def test_single_candidate(self):
        result = make_targeted_selection("Pick", [Candidate("Only", 42)], lambda v: {"picked": v})
        assert result == {"picked": 42}

    def test_lazy_candidates_never_collapse(self):
        result = make_targeted_selection("Pick", lambda: [Candidate("Only", 42)], lambda v: {"picked": v})
        assert isinstance(result["select_target"], SelectTarget)
        assert result["select_target"].resolve_candidates()[0].value == 42

    def test_select_enemy_to_kill_single(self, context, rival):
        prey = make_card("Prey")
        place(rival, prey)
        assert p.select_enemy_to_kill()(context) == {"kill_targets": [prey]}

    def test_collapse_matches_explicit_pick(self, make_context, rival):
        a, b = make_card("A"), make_card("B")
        place(rival, a, b)
        prompt = p.select_enemy_to_kill()(make_context())["select_target"]
        picked = prompt.on_select(a)

        rival.field[1] = None
        collapsed = p.select_enemy_to_kill()(make_context())
        assert collapsed == picked

    def test_rival_with_one_card_discards_it(self, context, rival):
        only = make_card("Only")
        rival.hand.append(only)
        result = p.force_opponent_discard()(context)
        assert result == {"discard_cards": {"player_index": 1, "cards": [only]}}
        assert "Rival discards Only." in context.log

    def test_rival_with_two_cards_is_asked(self, context, rival):
        rival.hand.extend([make_card("A"), make_card("B")])
        prompt = p.force_opponent_discard()(context)["select_target"]
        assert prompt.is_opponent_selection
        assert prompt.selecting_player_index == 1
        assert len(prompt.resolve_candidates()) == 2


class TestEnemyPicks:
    """Tests for enemy picks under the targeting rules."""

    def test_lure_restricts_candidates(self, context, rival):
        decoy = make_card("Decoy", keywords=[Keyword.LURE.value])
        place(rival, make_card("A"), make_card("B"), decoy)
        assert p.select_enemy_to_kill()(context) == {"kill_targets": [decoy]}

    def test_prompt_lists_targetable_only(self, context, rival):
        a, b = make_card("A"), make_card("B")
        ghost = make_card("Ghost", keywords=[Keyword.INVISIBLE.value])
        place(rival, a, ghost, b)
        prompt = p.select_enemy_to_freeze()(context)["select_target"]
        assert [c.value for c in prompt.resolve_candidates()] == [a, b]

    def test_targeted_response_replaces_result(self, context, rival):
        """A creature that reacts to being targeted decides the outcome."""
        mirror = make_card("Mirror", on_targeted=lambda ctx: {"reflected": ctx.target.name})
        place(rival, mirror)
        assert p.select_enemy_to_kill()(context) == {"reflected": "Mirror"}

    def test_select_target_runs_nested_effect_on_pick(self, context, rival):
        prey = make_card("Prey")
        place(rival, prey)
        result = p.select_target("enemy", p.kill_creature("target"))(context)
        assert result == {"kill_creature": prey}

    def test_target_for_damage_offers_rival(self, context, rival):
        place(rival, make_card("A"))
        prompt = p.select_target_for_damage(2)(context)["select_target"]
        kinds = [c.value.kind for c in prompt.resolve_candidates()]
        assert kinds == ["creature", "player"]
        rival_ref = prompt.resolve_candidates()[-1].value
        assert prompt.on_select(rival_ref) == {"damage_opponent": 2}


class TestDestroy:
    """Tests for destroy target modes."""

    def test_enemy_creatures(self, context, rival):
        creature_a = make_card("A")
        rival.field[0] = None
        rival.field[1] = creature_a
        result = p.destroy({"target": "enemyCreatures"})(context)
        assert result == {"destroy_creatures": {"creatures": [creature_a], "owner_index": 1}}

    def test_all_creatures(self, context, me, rival):
        mine, theirs = make_card("Mine"), make_card("Theirs")
        place(me, mine)
        place(rival, theirs)
        result = p.destroy({"target": "allCreatures"})(context)
        assert result["destroy_creatures"] == {"creatures": [mine], "owner_index": 0}
        assert result["destroy_creatures_opponent"] == {"creatures": [theirs], "owner_index": 1}


class TestKeywordGrants:
    """Keyword and status grants are descriptors, never mutations."""

    def test_grant_keyword_all_friendly(self, context, me):
        a, b = make_card("A"), make_card("B")
        place(me, a, b)
        result = p.grant_keyword("all-friendly", "Barrier")(context)
        assert result == {"grant_keyword_to_all": {"creatures": [a, b], "keyword": "Barrier"}}
        assert a.keywords == [] and b.keywords == []

    def test_add_keyword_capitalizes(self, make_context):
        source = make_card("Source")
        result = p.add_keyword({"keyword": "haste", "target": "self"})(make_context(creature=source))
        assert result == {"add_keyword": {"creature": source, "keyword": "Haste"}}

    def test_freeze_all_enemies(self, context, rival):
        enemy = make_card("Enemy")
        place(rival, enemy)
        result = p.freeze_all_enemies()(context)
        assert result["grant_keyword_to_all"]["keyword"] == Keyword.FROZEN.value
        assert Keyword.FROZEN.value not in enemy.keywords

    def test_kill_all_enemy_spares_invisible(self, context, rival):
        plain = make_card("Plain")
        ghost = make_card("Ghost", keywords=[Keyword.INVISIBLE.value])
        place(rival, plain, ghost)
        assert p.kill_all("all-enemy")(context) == {"kill_all_creatures": [plain]}


class TestDeck:
    """Tests for deck searches."""

    def test_tutor_empty_deck(self, context):
        assert p.tutor_from_deck("any")(context) == {}
        assert "Deck is empty." in context.log

    def test_tutor_single_match(self, context, me):
        spell = make_card("Spell", card_type=CardType.SPELL.value)
        me.deck.extend([make_card("Prey"), spell])
        result = p.tutor_from_deck("spell")(context)
        assert result == {"add_to_hand": {"player_index": 0, "card": spell, "from_deck": True}}

    def test_tutor_candidates_sorted(self, context, me):
        trap = make_card("Net", card_type=CardType.TRAP.value)
        zebra = make_card("Zebra")
        ant = make_card("Ant")
        me.deck.extend([trap, zebra, ant])
        prompt = p.tutor_from_deck("any")(context)["select_target"]
        assert prompt.is_lazy
        assert [c.value.name for c in prompt.resolve_candidates()] == ["Ant", "Zebra", "Net"]

    def test_discard_candidates_read_after_draw(self, context, me):
        """The drawn card is offered once the draw has been applied."""
        me.hand.append(make_card("Kept"))
        result = p.draw_then_discard(1, 1)(context)
        assert result["draw"] == 1

        drawn = make_card("Drawn")
        me.hand.append(drawn)
        offered = [c.value for c in result["select_target"].resolve_candidates()]
        assert drawn in offered
        assert len(offered) == 2

    def test_tutored_spell_offered_after_add_to_hand(self, context, me):
        spell = make_card("Spell", card_type=CardType.SPELL.value)
        me.deck.extend([spell, make_card("Prey")])
        first = p.tutor_and_play_spell()(context)["select_target"]

        after_tutor = first.on_select(spell)
        assert after_tutor["add_to_hand"]["card"] is spell
        second = after_tutor["select_target"]
        assert second.is_lazy
        assert second.resolve_candidates() == []

        me.deck.remove(spell)
        me.hand.append(spell)
        assert [c.value for c in second.resolve_candidates()] == [spell]
        assert second.on_select(spell) == {"play_from_hand": {"player_index": 0, "card": spell}}


class TestSelectFromGroup:
    """Tests for named target groups."""

    def test_enemy_prey_none(self, context, rival):
        place(rival, make_card("Shark", card_type=CardType.PREDATOR.value))
        effect = p.select_from_group({"targetGroup": "enemy-prey", "effect": {"kill": True}})
        assert effect(context) == {}
        assert "No valid targets available." in context.log

    def test_enemy_prey_one(self, context, rival):
        prey = make_card("Prey")
        place(rival, make_card("Shark", card_type=CardType.PREDATOR.value), prey)
        effect = p.select_from_group({"targetGroup": "enemy-prey", "effect": {"kill": True}})
        assert effect(context) == {"kill_creature": prey}

    def test_unknown_group(self, context, caplog):
        with caplog.at_level("WARNING"):
            assert p.build_target_candidates("nowhere", context) == []
        assert "Unknown target group" in caplog.text

    def test_entities_with_enemy_lure(self, context, me, rival):
        decoy = make_card("Decoy", keywords=[Keyword.LURE.value])
        place(me, make_card("Friend"))
        place(rival, make_card("Plain"), decoy)
        candidates = p.build_target_candidates("all-entities", context)
        assert [c.value.creature for c in candidates] == [decoy]

    def test_shortcuts_accumulate(self, context):
        creature = make_card("Target")
        ref = TargetRef(kind="creature", creature=creature, owner_index=0)
        result = p.apply_effect_to_selection(
            ref, {"buff": {"attack": 1, "health": 1}, "keyword": "Haste"}, context
        )
        assert result == {
            "buff_creature": {"creature": creature, "attack": 1, "health": 1},
            "add_keyword": {"creature": creature, "keyword": "Haste"},
        }

    def test_nested_definition(self, context):
        ref = TargetRef(kind="creature", creature=make_card("Target"), owner_index=1)
        result = p.apply_effect_to_selection(ref, {"type": "heal", "params": {"amount": 2}}, context)
        assert result == {"heal": 2}

    def test_nested_definition_sees_selection(self, context):
        creature = make_card("Target")
        ref = TargetRef(kind="creature", creature=creature, owner_index=1)
        result = p.apply_effect_to_selection(
            ref, {"type": "killCreature", "params": {"targetType": "target"}}, context
        )
        assert result == {"kill_creature": creature}

    def test_player_damage(self, context):
        ref = TargetRef(kind="player", player_index=1)
        assert p.apply_effect_to_selection(ref, {"damage": 3}, context) == {"damage_opponent": 3}


class TestOptions:
    """Tests for chooseOption and choice."""

    def test_single_option_taken(self, context):
        effect = p.choose_option({"options": [{"label": "Mend", "effect": {"heal": 2}}]})
        assert effect(context) == {"heal": 2}

    def test_option_prompt(self, context):
        effect = p.choose_option({
            "title": "Pick one",
            "options": [
                {"label": "Mend", "effect": {"heal": 2}},
                {"label": "Study", "effect": {"type": "draw", "params": {"count": 1}}},
            ],
        })
        prompt = effect(context)["select_option"]
        assert isinstance(prompt, SelectOption)
        assert [o.id for o in prompt.options] == ["0", "1"]
        assert prompt.on_select(prompt.options[1]) == {"draw": 1}

    def test_choice_resolves_picked_definition(self, context):
        effect = p.choice({"choices": [
            {"label": "Heal", "type": "heal", "params": {"amount": 3}},
            {"label": "Hurt", "type": "damageRival", "params": {"amount": 1}},
        ]})
        prompt = effect(context)["select_option"]
        assert prompt.on_select(prompt.options[0]) == {"heal": 3}
        assert "Chose: Heal" in context.log


class TestTribal:
    """Tests for web, pride and shell scaling."""

    def test_draw_per_pride_is_capped(self, make_context, me):
        place(me, *[make_card(f"Lion {i}", keywords=[Keyword.PRIDE.value]) for i in range(3)])
        ctx = make_context(resolver=EffectResolver(settings=EngineSettings(max_scaled_draw=2)))
        assert p.draw_per_pride()(ctx) == {"draw": 2}

    def test_web_all_enemies_skips_webbed(self, context, rival):
        fresh = make_card("Fresh")
        stuck = make_card("Stuck", keywords=[Keyword.WEBBED.value])
        place(rival, fresh, stuck)
        result = p.web_all_enemies()(context)
        assert result == {"grant_keyword_to_all": {"creatures": [fresh], "keyword": Keyword.WEBBED.value}}

    def test_regenerate_depleted_shells_only(self, context, me):
        full = make_card("Full", keywords=[Keyword.SHELL.value], shell_level=2, current_shell=2)
        cracked = make_card("Cracked", keywords=[Keyword.SHELL.value], shell_level=2, current_shell=0)
        place(me, full, cracked)
        assert p.regenerate_all_shells()(context) == {"regenerate_shells": [cracked]}

    def test_grant_shell_single_candidate(self, context, me):
        crab = make_card("Crab")
        place(me, crab)
        result = p.grant_shell(2)(context)
        assert result == {"grant_shell": {"creature": crab, "shell_level": 2}}
