"""Effect definition schema - the card data DSL and its validation."""

from .effect_dsl import (
    REQUIRED_PARAMS,
    ConditionType,
    EffectDefinition,
    EffectNode,
    EffectTrigger,
    EffectType,
    GroupEffect,
    Stats,
    TargetGroup,
    effect_node,
)
from .validation import (
    ValidationResult,
    validate_card_catalog,
    validate_card_effects,
    validate_effect_definition,
)

__all__ = [
    "REQUIRED_PARAMS",
    "ConditionType",
    "EffectDefinition",
    "EffectNode",
    "EffectTrigger",
    "EffectType",
    "GroupEffect",
    "Stats",
    "TargetGroup",
    "effect_node",
    "ValidationResult",
    "validate_card_catalog",
    "validate_card_effects",
    "validate_effect_definition",
]
