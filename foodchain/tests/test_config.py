"""
Tests for engine settings and logging configuration.
"""

import logging

from .. import config
from ..config import EngineSettings, configure_logging


class TestEngineSettings:
    """Tests for EngineSettings."""

    def test_defaults(self):
        settings = EngineSettings()
        assert settings.strict_effects is False
        assert settings.max_scaled_draw == 3
        assert settings.reveal_hand_duration_ms == 3000

    def test_strict_from_env(self, monkeypatch):
        monkeypatch.setattr(config, "FOODCHAIN_STRICT_EFFECTS", "true")
        assert EngineSettings.from_env().strict_effects is True

    def test_lenient_from_env(self, monkeypatch):
        monkeypatch.setattr(config, "FOODCHAIN_STRICT_EFFECTS", "0")
        assert EngineSettings.from_env().strict_effects is False


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_package_level(self):
        logger = logging.getLogger("foodchain")
        previous = logger.level
        try:
            configure_logging("debug")
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(previous)
