"""
Configuration - Environment-driven engine settings.

Environment variables:
- FOODCHAIN_ENV: deployment environment name
- FOODCHAIN_LOG_LEVEL: level for the "foodchain" logger
- FOODCHAIN_STRICT_EFFECTS: "1" to raise on malformed effect data
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import os


FOODCHAIN_ENV = os.getenv("FOODCHAIN_ENV", "development")
FOODCHAIN_LOG_LEVEL = os.getenv("FOODCHAIN_LOG_LEVEL", "WARNING")
FOODCHAIN_STRICT_EFFECTS = os.getenv("FOODCHAIN_STRICT_EFFECTS", "0")

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class EngineSettings:
    """Tunables shared by the resolver and the primitives."""
    # Raise instead of warn on unknown types / malformed params
    strict_effects: bool = False
    # Cap for "draw one per X" effects
    max_scaled_draw: int = 3
    # How long a revealed hand stays visible
    reveal_hand_duration_ms: int = 3000

    @classmethod
    def from_env(cls) -> EngineSettings:
        """Build settings from the FOODCHAIN_* environment."""
        return cls(strict_effects=FOODCHAIN_STRICT_EFFECTS.lower() in _TRUTHY)


def configure_logging(level: str | None = None) -> None:
    """Apply a log level to the package logger."""
    logging.getLogger("foodchain").setLevel((level or FOODCHAIN_LOG_LEVEL).upper())
