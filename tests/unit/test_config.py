"""Tests for configuration, clocks and logging setup."""

import logging

import pytest
import structlog

from liquidity_book.clock import ManualClock, SystemClock
from liquidity_book.config import DEFAULT_POOL_CONFIG, ServiceSettings
from liquidity_book.log_config import configure_logging


class TestPoolConfig:
    def test_defaults(self):
        assert DEFAULT_POOL_CONFIG.bin_step_bps == 25
        assert DEFAULT_POOL_CONFIG.fee_bps == 30
        assert DEFAULT_POOL_CONFIG.max_bins_per_swap == 256


class TestServiceSettings:
    def test_defaults(self, monkeypatch):
        for name in ("LB_HOST", "LB_PORT", "LB_DEBUG", "LB_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        settings = ServiceSettings.from_env()

        assert settings == ServiceSettings()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("LB_HOST", "127.0.0.1")
        monkeypatch.setenv("LB_PORT", "9000")
        monkeypatch.setenv("LB_DEBUG", "yes")
        monkeypatch.setenv("LB_LOG_LEVEL", "debug")

        settings = ServiceSettings.from_env()

        assert settings.host == "127.0.0.1"
        assert settings.port == 9000
        assert settings.debug is True
        assert settings.log_level == "DEBUG"


class TestClocks:
    def test_manual_clock(self):
        clock = ManualClock(10)
        assert clock.now_ms() == 10
        assert clock.advance(5) == 15
        clock.set(20)
        assert clock.now_ms() == 20

    def test_manual_clock_cannot_go_back(self):
        clock = ManualClock(10)
        with pytest.raises(ValueError):
            clock.advance(-1)
        with pytest.raises(ValueError):
            clock.set(5)

    def test_system_clock_is_monotonic_enough(self):
        clock = SystemClock()
        first = clock.now_ms()
        assert clock.now_ms() >= first > 0


class TestLogging:
    def test_configure_logging_filters_below_level(self):
        try:
            configure_logging("warning")
            config = structlog.get_config()
            assert len(config["processors"]) == 3
            assert config["wrapper_class"] is structlog.make_filtering_bound_logger(logging.WARNING)
        finally:
            structlog.reset_defaults()

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("chatty")
