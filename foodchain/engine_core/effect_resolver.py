"""
Effect Resolver - Turns effect definitions into results.

A definition is one of:
- a {type, params} node, dispatched through the EffectRegistry
- a list of nodes, resolved in order and merged into one chain
- None or empty, which does nothing

Unknown types and malformed params never abort a game: they log a
warning and resolve to {}. With strict_effects enabled they raise
instead, which is what card authoring tools want.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional
import logging

from pydantic import ValidationError

from ..config import EngineSettings
from ..errors import EffectDefinitionError, UnknownEffectTypeError
from .chain import merge_results
from .context import EffectContext, EffectResult, Primitive
from .registry import EffectRegistry, build_default_registry, lazy

logger = logging.getLogger(__name__)


@dataclass
class EffectResolver:
    """Resolves effect definitions against an EffectContext."""
    registry: EffectRegistry = field(default_factory=build_default_registry)
    settings: EngineSettings = field(default_factory=EngineSettings.from_env)

    def resolve(self, definition: Any, context: EffectContext) -> EffectResult:
        if context.resolver is None:
            context.resolver = self

        if not definition:
            return {}

        if isinstance(definition, (list, tuple)):
            return merge_results([self.resolve(node, context) for node in definition])

        if not isinstance(definition, dict):
            return self._malformed(None, f"definition must be an object or a list, got {type(definition).__name__}")

        effect_type = definition.get("type")
        binding = self.registry.binding_for(effect_type)
        if binding is None:
            return self._unknown(effect_type)

        try:
            primitive = binding.bind(definition.get("params"), self)
        except EffectDefinitionError as e:
            return self._malformed(effect_type, "; ".join(e.errors), e)
        except (ValidationError, TypeError, ValueError, KeyError) as e:
            return self._malformed(effect_type, str(e), e)

        return primitive(context) or {}

    def bind(self, definition: Any) -> Primitive:
        """Primitive that resolves definition when applied."""
        return lazy(definition, self)

    def _unknown(self, effect_type: Any) -> EffectResult:
        if self.settings.strict_effects:
            raise UnknownEffectTypeError(str(effect_type))
        logger.warning("Unknown effect type: %r", effect_type)
        return {}

    def _malformed(self, effect_type: Any, reason: str, cause: Optional[Exception] = None) -> EffectResult:
        message = f"Malformed {effect_type!r} effect: {reason}" if effect_type else f"Malformed effect: {reason}"
        if self.settings.strict_effects:
            raise EffectDefinitionError([message]) from cause
        logger.warning(message)
        return {}


def resolve_effect(
    definition: Any,
    context: EffectContext,
    resolver: Optional[EffectResolver] = None,
) -> EffectResult:
    """Resolve with the given resolver, the context's, or a fresh default one."""
    resolver = resolver or context.resolver or EffectResolver()
    return resolver.resolve(definition, context)
