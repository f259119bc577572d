"""
Effect Validation - Authoring-time checks for card effect data.

Validates that:
1. Every node names a known effect type
2. Required params are present
3. Nested definitions (composite, conditional, ...) are themselves valid
4. Target groups, condition types and option lists are usable

The resolver tolerates all of these at runtime by logging and doing
nothing; validation is how card authors find them before a game does.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterable

from ..errors import EffectDefinitionError
from .effect_dsl import (
    REQUIRED_PARAMS,
    ConditionType,
    EffectTrigger,
    EffectType,
    TargetGroup,
)

GROUP_SHORTCUTS = (
    "damage", "heal", "kill", "buff", "keyword", "regen", "consume",
    "removeAbilities", "steal", "copyAbilities", "copyStats",
    "copyAbilitiesFrom", "play", "paralyze", "addToHand", "sacrifice",
)
DESTROY_TARGETS = {"targetEnemy", "enemyCreatures", "allCreatures"}
ADD_KEYWORD_TARGETS = {"targetCreature", "friendlyCreatures", "self"}
BUFF_TARGETS = {"targetCreature", "targetPredator", "targetEnemy", "friendlyCreatures", "self"}


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def validate_effect_definition(definition: Any, path: str = "effect") -> list[str]:
    """Errors found in one definition (node or list of nodes)."""
    errors: list[str] = []
    _validate_definition(definition, path, errors, [])
    return errors


def validate_card_effects(card_data: dict[str, Any]) -> ValidationResult:
    """Validate every trigger definition of one card."""
    errors: list[str] = []
    warnings: list[str] = []
    card_id = card_data.get("id", "<unknown>")

    effects = card_data.get("effects") or {}
    if not isinstance(effects, dict):
        errors.append(f"{card_id}: effects must be an object keyed by trigger")
        return ValidationResult(valid=False, errors=errors, warnings=warnings)

    triggers = {t.value for t in EffectTrigger}
    for trigger, definition in effects.items():
        path = f"{card_id}.{trigger}"
        if trigger not in triggers:
            warnings.append(f"{path}: unknown trigger {trigger!r}")
        if not definition:
            warnings.append(f"{path}: empty definition")
            continue
        _validate_definition(definition, path, errors, warnings)

    return ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)


def validate_card_catalog(cards: Iterable[dict[str, Any]], raise_on_error: bool = False) -> ValidationResult:
    """
    Validate a whole card catalog.

    Also reports duplicate card ids. Raises EffectDefinitionError if
    raise_on_error=True and errors exist.
    """
    errors: list[str] = []
    warnings: list[str] = []
    seen: set[str] = set()

    for card in cards:
        card_id = card.get("id")
        if not card_id:
            errors.append("card without id")
        elif card_id in seen:
            errors.append(f"duplicate card id {card_id!r}")
        else:
            seen.add(card_id)

        result = validate_card_effects(card)
        errors.extend(result.errors)
        warnings.extend(result.warnings)

    if raise_on_error and errors:
        raise EffectDefinitionError(errors)

    return ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)


# =============================================================================
# Node checks
# =============================================================================

def _validate_definition(definition: Any, path: str, errors: list[str], warnings: list[str]) -> None:
    if isinstance(definition, list):
        for i, node in enumerate(definition):
            _validate_definition(node, f"{path}[{i}]", errors, warnings)
        return
    if not isinstance(definition, dict):
        errors.append(f"{path}: definition must be an object or a list")
        return
    _validate_node(definition, path, errors, warnings)


def _validate_node(node: dict[str, Any], path: str, errors: list[str], warnings: list[str]) -> None:
    type_name = node.get("type")
    if not type_name:
        errors.append(f"{path}: missing type")
        return

    effect_type = EffectType.lookup(type_name)
    if effect_type is None:
        errors.append(f"{path}: unknown effect type {type_name!r}")
        return

    params = node.get("params") or {}
    if not isinstance(params, dict):
        errors.append(f"{path}: params must be an object")
        return

    path = f"{path}<{type_name}>"
    for key in REQUIRED_PARAMS.get(effect_type, ()):
        if key not in params:
            errors.append(f"{path}: missing required param {key!r}")

    if effect_type == EffectType.COMPOSITE:
        effects = params.get("effects") or []
        if not effects:
            warnings.append(f"{path}: composite has no effects")
        _validate_definition(effects, f"{path}.effects", errors, warnings)

    elif effect_type in (EffectType.REPEAT, EffectType.SELECT_TARGET, EffectType.SELECT_CONSUME):
        if params.get("effect"):
            _validate_definition(params["effect"], f"{path}.effect", errors, warnings)

    elif effect_type == EffectType.CONDITIONAL:
        _validate_condition(params.get("condition"), f"{path}.condition", errors)
        for key in ("effectIfTrue", "effectIfFalse"):
            if params.get(key):
                _validate_definition(params[key], f"{path}.{key}", errors, warnings)

    elif effect_type == EffectType.SELECT_FROM_GROUP:
        _validate_group_selection(params, path, errors, warnings)

    elif effect_type == EffectType.CHOOSE_OPTION:
        options = params.get("options") or []
        _check_option_count(options, "options", path, errors, warnings)
        for i, option in enumerate(options):
            if not isinstance(option, dict) or not option.get("label"):
                errors.append(f"{path}.options[{i}]: option needs a label")
                continue
            effect = option.get("effect")
            if isinstance(effect, (dict, list)) and (isinstance(effect, list) or "type" in effect):
                _validate_definition(effect, f"{path}.options[{i}].effect", errors, warnings)

    elif effect_type == EffectType.CHOICE:
        choices = params.get("choices") or []
        _check_option_count(choices, "choices", path, errors, warnings)
        for i, choice in enumerate(choices):
            if not isinstance(choice, dict) or not choice.get("label"):
                errors.append(f"{path}.choices[{i}]: choice needs a label")
                continue
            _validate_node(choice, f"{path}.choices[{i}]", errors, warnings)

    elif effect_type == EffectType.DESTROY:
        _check_choice(params.get("target", "targetEnemy"), DESTROY_TARGETS, "target", path, errors)

    elif effect_type == EffectType.ADD_KEYWORD:
        if "target" in params:
            _check_choice(params["target"], ADD_KEYWORD_TARGETS, "target", path, errors)

    elif effect_type == EffectType.BUFF:
        if "target" in params:
            _check_choice(params["target"], BUFF_TARGETS, "target", path, errors)


def _validate_condition(condition: Any, path: str, errors: list[str]) -> None:
    if not isinstance(condition, dict):
        errors.append(f"{path}: condition must be an object")
        return
    valid = {c.value for c in ConditionType}
    if condition.get("type") not in valid:
        errors.append(f"{path}: unknown condition type {condition.get('type')!r}")


def _validate_group_selection(params: dict[str, Any], path: str, errors: list[str], warnings: list[str]) -> None:
    group = params.get("targetGroup")
    if group is not None and group not in {g.value for g in TargetGroup}:
        errors.append(f"{path}: unknown target group {group!r}")

    effect = params.get("effect") or {}
    if not isinstance(effect, dict):
        errors.append(f"{path}.effect: must be an object")
        return
    if any(effect.get(key) for key in GROUP_SHORTCUTS) or "draw" in effect:
        return
    if effect.get("type"):
        _validate_node({"type": effect["type"], "params": effect.get("params")}, f"{path}.effect", errors, warnings)
    else:
        warnings.append(f"{path}.effect: selection has no effect")


def _check_option_count(items: list[Any], noun: str, path: str, errors: list[str], warnings: list[str]) -> None:
    if not items:
        errors.append(f"{path}: no {noun}")
    elif len(items) == 1:
        warnings.append(f"{path}: only one of {noun}, nothing to choose")


def _check_choice(value: Any, allowed: set[str], key: str, path: str, errors: list[str]) -> None:
    if value not in allowed:
        errors.append(f"{path}: {key} {value!r} is not one of {sorted(allowed)}")
