"""Tests for settings, logging setup and the exception hierarchy."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from spike_studio.config import clear_settings_cache, get_logger, get_settings
from spike_studio.config.settings import Settings
from spike_studio.exceptions import (
    ConfigurationError,
    MalformedIdentifierError,
    SpikeNotFoundError,
    SpikeStudioError,
)
from spike_studio.matching.selector import SpikeSelector
from spike_studio.spikes.catalog import SpikeCatalog


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path: Path):
    """Isolate from any local .env and reset the cache around each test."""
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.generated_limit == 2000
        assert s.auto_top == 5
        assert s.metadata_batch_size == 50
        assert s.alias_boost == 1.0
        assert s.confidence_threshold == 0.4
        assert s.aliases_enabled is True
        assert s.cache_max_size == 50
        assert s.cache_ttl_seconds == 300
        assert s.log_level == "INFO"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SPIKE_STUDIO_AUTO_TOP", "7")
        monkeypatch.setenv("SPIKE_STUDIO_AUTO_BATCH_MULTIPLIER", "3")
        monkeypatch.setenv("SPIKE_STUDIO_ALIASES_ENABLED", "false")
        monkeypatch.setenv("SPIKE_STUDIO_LOG_LEVEL", "debug")
        s = get_settings()
        assert s.auto_top == 7
        assert s.metadata_batch_size == 21
        assert s.aliases_enabled is False
        assert s.log_level == "DEBUG"

    def test_get_settings_cached(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("SPIKE_STUDIO_AUTO_TOP", "9")
        assert get_settings() is first
        clear_settings_cache()
        assert get_settings().auto_top == 9

    def test_generated_cap(self):
        assert Settings(generated_limit=0).generated_cap is None
        assert Settings(generated_limit=10).generated_cap == 10

    def test_invalid_values(self):
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")
        with pytest.raises(ValidationError):
            Settings(confidence_threshold=1.5)
        with pytest.raises(ValidationError):
            Settings(auto_top=0)

    def test_invalid_env_raises_configuration_error(self, monkeypatch):
        monkeypatch.setenv("SPIKE_STUDIO_LOG_LEVEL", "chatty")
        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()
        assert "log_level" in exc_info.value.details
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_spikes_dir_expands_user(self):
        assert "~" not in str(Settings(spikes_dir=Path("~/spikes")).spikes_dir)

    def test_wiring_from_settings(self, tmp_path: Path):
        s = Settings(spikes_dir=tmp_path, auto_top=3, cache_max_size=4, list_limit=10)
        catalog = SpikeCatalog.from_settings(s)
        selector = SpikeSelector.from_settings(catalog, s)
        assert catalog.store.base_dir == tmp_path
        assert catalog.cache.max_size == 4
        assert catalog.list_limit == 10
        assert selector.top_n == 3
        assert selector.batch_size == 30


class TestLogging:
    def test_loggers_are_namespaced(self):
        assert get_logger("spike_studio.service").name == "spike_studio.service"
        assert get_logger("tests").name == "spike_studio.tests"
        assert isinstance(get_logger("x"), logging.Logger)


class TestExceptions:
    def test_str_includes_details(self):
        err = SpikeStudioError("Load failed", details="line 3")
        assert str(err) == "Load failed\n  Details: line 3"
        assert err.message == "Load failed"

    def test_value_error_compatible(self):
        assert issubclass(SpikeNotFoundError, ValueError)
        assert issubclass(MalformedIdentifierError, SpikeStudioError)
