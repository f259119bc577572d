"""
Tests for the effect resolver and registry.

Tests:
- Dispatch of {type, params} nodes and lists
- Unknown types and malformed params (lenient and strict)
- Nested definitions: composite, repeat, conditional, selectTarget
- Registry exhaustiveness
"""

import logging

import pytest

from ..errors import EffectDefinitionError, UnknownEffectTypeError
from ..engine_core.effect_resolver import resolve_effect
from ..engine_core.registry import (
    DEFAULT_BINDINGS,
    EffectRegistry,
    build_default_registry,
    snake_case,
)
from ..spec_schema.effect_dsl import EffectType, conditional_effect, effect_node
from .conftest import make_card, place


class TestDispatch:
    """Tests for plain dispatch."""

    def test_heal(self, context, resolver):
        assert resolver.resolve({"type": "heal", "params": {"amount": 5}}, context) == {"heal": 5}

    @pytest.mark.parametrize("definition", [None, {}, []])
    def test_nothing(self, context, resolver, definition):
        assert resolver.resolve(definition, context) == {}

    def test_list_is_merged(self, context, resolver):
        definition = [
            {"type": "heal", "params": {"amount": 1}},
            {"type": "draw", "params": {"count": 2}},
        ]
        assert resolver.resolve(definition, context) == {"heal": 1, "draw": 2}

    def test_defaults_apply_for_missing_params(self, context, resolver):
        result = resolver.resolve({"type": "negateAndDamageAll"}, context)
        assert result == {"negate_attack": True, "damage_all_creatures": 0, "damage_both_players": 0}

    def test_camel_case_params(self, make_context, resolver):
        source = make_card("Source")
        definition = effect_node(EffectType.DAMAGE_CREATURE, targetType="self", amount=2, sourceLabel="venom")
        result = resolver.resolve(definition, make_context(creature=source))
        assert result == {"damage_creature": {"creature": source, "amount": 2, "source_label": "venom"}}

    def test_positional_params(self, context, resolver):
        result = resolver.resolve({"type": "damageRivalAndSelectEnemy", "params": [3, 1]}, context)
        assert result == {"damage_opponent": 3}

    def test_context_remembers_resolver(self, make_context, resolver):
        ctx = make_context(resolver=None)
        resolver.resolve({"type": "heal", "params": {"amount": 1}}, ctx)
        assert ctx.resolver is resolver

    def test_resolve_effect_uses_context_resolver(self, context):
        assert resolve_effect({"type": "draw", "params": {"count": 1}}, context) == {"draw": 1}


class TestBadDefinitions:
    """Unknown or malformed definitions are no-ops unless strict."""

    def test_unknown_type_warns(self, context, resolver, caplog):
        with caplog.at_level(logging.WARNING):
            assert resolver.resolve({"type": "summonDragon"}, context) == {}
        assert "Unknown effect type" in caplog.text
        assert "summonDragon" in caplog.text

    def test_unknown_type_strict(self, context, strict_resolver):
        with pytest.raises(UnknownEffectTypeError) as exc_info:
            strict_resolver.resolve({"type": "summonDragon"}, context)
        assert exc_info.value.effect_type == "summonDragon"

    def test_missing_required_param_warns(self, context, resolver, caplog):
        with caplog.at_level(logging.WARNING):
            assert resolver.resolve({"type": "heal", "params": {}}, context) == {}
        assert "Malformed 'heal' effect" in caplog.text

    def test_missing_required_param_strict(self, context, strict_resolver):
        with pytest.raises(EffectDefinitionError):
            strict_resolver.resolve({"type": "heal"}, context)

    def test_invalid_model_params(self, context, resolver, caplog):
        with caplog.at_level(logging.WARNING):
            assert resolver.resolve({"type": "addKeyword", "params": {"target": "self"}}, context) == {}
        assert "Malformed 'addKeyword' effect" in caplog.text

    def test_not_an_object(self, context, resolver, caplog):
        with caplog.at_level(logging.WARNING):
            assert resolver.resolve("heal", context) == {}

    def test_bad_node_in_list_is_skipped(self, context, resolver):
        definition = [{"type": "summonDragon"}, {"type": "heal", "params": {"amount": 2}}]
        assert resolver.resolve(definition, context) == {"heal": 2}


class TestNestedDefinitions:
    """Tests for nodes that carry other definitions."""

    def test_composite(self, context, resolver):
        definition = effect_node(EffectType.COMPOSITE, effects=[
            effect_node(EffectType.HEAL, amount=1),
            effect_node(EffectType.DRAW, count=1),
        ])
        assert resolver.resolve(definition, context) == {"composite": [{"heal": 1}, {"draw": 1}]}

    def test_repeat(self, context, resolver):
        definition = effect_node(EffectType.REPEAT, effect=effect_node(EffectType.DRAW, count=1), count=2)
        assert resolver.resolve(definition, context) == {"composite": [{"draw": 1}, {"draw": 1}]}

    def test_conditional_true(self, context, resolver, me):
        me.hand.append(make_card("Card"))
        definition = conditional_effect("hasCardsInHand", {"type": "heal", "params": {"amount": 2}},
                                        {"type": "draw", "params": {"count": 1}})
        assert resolver.resolve(definition, context) == {"heal": 2}

    def test_conditional_false_with_min_count(self, context, resolver, me):
        me.hand.append(make_card("Card"))
        definition = conditional_effect("hasCardsInHand", {"type": "heal", "params": {"amount": 2}},
                                        {"type": "draw", "params": {"count": 1}}, minCount=2)
        assert resolver.resolve(definition, context) == {"draw": 1}

    def test_conditional_unknown_condition(self, context, resolver, caplog):
        definition = {"type": "conditional", "params": {
            "condition": {"type": "isFullMoon"},
            "effectIfTrue": {"type": "heal", "params": {"amount": 1}},
        }}
        with caplog.at_level(logging.WARNING):
            assert resolver.resolve(definition, context) == {}
        assert "Malformed 'conditional' effect" in caplog.text

    def test_select_target_nested(self, context, resolver, rival):
        prey = make_card("Prey")
        place(rival, prey)
        definition = {"type": "selectTarget", "params": {
            "selectionType": "enemy",
            "effect": {"type": "killCreature", "params": {"targetType": "target"}},
        }}
        assert resolver.resolve(definition, context) == {"kill_creature": prey}

    def test_select_creature_for_buff_accepts_bare_stats(self, context, resolver, me):
        crab = make_card("Crab")
        place(me, crab)
        result = resolver.resolve({"type": "selectCreatureForBuff", "params": {"attack": 2, "health": 1}}, context)
        assert result["buff_creature"] == {"creature": crab, "attack": 2, "health": 1}

    def test_chained_prompts(self, context, resolver, rival):
        """Two prompts in a list become one chain."""
        place(rival, make_card("A"), make_card("B"))
        definition = [
            {"type": "heal", "params": {"amount": 1}},
            {"type": "selectEnemyToKill"},
            {"type": "selectEnemyToFreeze"},
        ]
        result = resolver.resolve(definition, context)
        assert result["heal"] == 1
        first = result["select_target"]
        assert first.title == "Choose a Rival's creature to kill"

        target = first.resolve_candidates()[0].value
        after = first.on_select(target)
        assert after["kill_targets"] == [target]
        assert after["select_target"].title == "Choose a Rival's creature to freeze"


class TestRegistry:
    """Tests for registry construction."""

    def test_every_type_is_bound(self):
        registry = build_default_registry()
        assert len(registry) == len(EffectType)
        for effect_type in EffectType:
            assert effect_type.value in registry

    def test_missing_binding_rejected(self):
        bindings = dict(DEFAULT_BINDINGS)
        del bindings[EffectType.HEAL]
        with pytest.raises(EffectDefinitionError) as exc_info:
            EffectRegistry(bindings)
        assert "'heal'" in str(exc_info.value)

    def test_unknown_lookup(self):
        assert build_default_registry().binding_for("summonDragon") is None

    def test_bindings_build_primitives(self, resolver):
        """Every binding with no required params builds without error."""
        registry = build_default_registry()
        for effect_type in (EffectType.NEGATE_ATTACK, EffectType.KILL_ATTACKER, EffectType.WEB_ALL_ENEMIES):
            assert callable(registry.binding_for(effect_type).bind({}, resolver))

    @pytest.mark.parametrize("name,expected", [
        ("amount", "amount"),
        ("sourceLabel", "source_label"),
        ("healPerWebbed", "heal_per_webbed"),
        ("newCardId", "new_card_id"),
    ])
    def test_snake_case(self, name, expected):
        assert snake_case(name) == expected
