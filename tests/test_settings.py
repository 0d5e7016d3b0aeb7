"""
Tests for configuration loading
"""

import logging

from config.settings import Settings


class TestSettings:

    def test_log_level_is_normalised(self):
        settings = Settings(SECRET_KEY="test-secret-key", LOG_LEVEL="info")

        assert settings.LOG_LEVEL == "INFO"
        logging.getLogger("settings-test").setLevel(settings.LOG_LEVEL)

    def test_cors_origins_split(self):
        settings = Settings(SECRET_KEY="test-secret-key", ALLOWED_ORIGINS="http://a.test, http://b.test")

        assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]
