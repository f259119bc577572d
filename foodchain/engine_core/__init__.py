"""
Engine Core - Effect resolution for the creature card game.

The engine is the runtime that:
1. Reads the board through an EffectContext
2. Decides who may be targeted (Lure, Invisible, Acuity, Hidden)
3. Resolves effect definitions through the EffectRegistry
4. Returns EffectResult descriptors; it never mutates the board
5. Chains selection prompts so the UI can walk them one at a time
"""

from .state import Card, CardType, GameState, PlayerState
from .context import (
    Candidate,
    EffectContext,
    EffectLog,
    EffectResult,
    Option,
    Primitive,
    SelectOption,
    SelectTarget,
    TargetRef,
)
from .targeting import can_target_with_ability, filter_for_lure, targetable_enemies, targetable_friendlies
from .chain import SelectionDriver, merge_results
from .combinators import composite, conditional, repeat
from .registry import Binding, EffectRegistry, build_default_registry
from .effect_resolver import EffectResolver, resolve_effect
from .card_effects import effect_triggers, has_effect, resolve_card_effect

__all__ = [
    "Card",
    "CardType",
    "GameState",
    "PlayerState",
    "Candidate",
    "EffectContext",
    "EffectLog",
    "EffectResult",
    "Option",
    "Primitive",
    "SelectOption",
    "SelectTarget",
    "TargetRef",
    "can_target_with_ability",
    "filter_for_lure",
    "targetable_enemies",
    "targetable_friendlies",
    "SelectionDriver",
    "merge_results",
    "composite",
    "conditional",
    "repeat",
    "Binding",
    "EffectRegistry",
    "build_default_registry",
    "EffectResolver",
    "resolve_effect",
    "effect_triggers",
    "has_effect",
    "resolve_card_effect",
]
