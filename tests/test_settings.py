"""
Test Suite for Settings
=======================
"""

import pytest
from pydantic import ValidationError

from config import Settings, get_settings


class TestSettings:

    def test_defaults(self):
        settings = Settings()

        assert settings.DAYS_BACK == 30
        assert settings.MIN_SAMPLE_SIZE == 5
        assert settings.CONFIDENCE_THRESHOLD == 0.7
        assert settings.SPORT_FILTER is None
        assert settings.STREAK_MIN_LENGTH == 3
        assert settings.DEFAULT_STAKE == 100.0

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("DAYS_BACK", "14")
        monkeypatch.setenv("SPORT_FILTER", "nfl")

        settings = Settings()
        assert settings.DAYS_BACK == 14
        assert settings.SPORT_FILTER == "nfl"

    @pytest.mark.parametrize("value", [-0.1, 1.5])
    def test_confidence_threshold_range(self, value):
        with pytest.raises(ValidationError):
            Settings(CONFIDENCE_THRESHOLD=value)

    def test_confidence_threshold_bounds_allowed(self):
        assert Settings(CONFIDENCE_THRESHOLD=0.0).CONFIDENCE_THRESHOLD == 0.0
        assert Settings(CONFIDENCE_THRESHOLD=1.0).CONFIDENCE_THRESHOLD == 1.0

    def test_min_sample_size_positive(self):
        with pytest.raises(ValidationError):
            Settings(MIN_SAMPLE_SIZE=0)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
