"""Exceptions raised by the effect engine."""

from __future__ import annotations


class EngineError(Exception):
    """Base class for effect engine errors."""


class EffectDefinitionError(EngineError):
    """Raised when an effect definition is malformed."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Effect definition invalid with {len(errors)} error(s): {'; '.join(errors)}")


class UnknownEffectTypeError(EffectDefinitionError):
    """Raised when a definition names a type with no registered primitive."""

    def __init__(self, effect_type: str):
        self.effect_type = effect_type
        super().__init__([f"Unknown effect type: {effect_type!r}"])
