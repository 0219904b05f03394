"""Tests for configuration manager."""

import pytest  # type: ignore[import-not-found]

from mouse_idle_stats.core.config import ConfigManager


class TestConfigManager:
    """Test ConfigManager."""

    def test_defaults(self) -> None:
        """Test default settings."""
        config = ConfigManager()

        assert config.get("detector.checking_interval") == 120
        assert config.get("detector.counter_interval") == 1
        assert config.get("keep_alive.enabled") is False
        assert config.get("keep_alive.min_pixels") == 10
        assert config.get("keep_alive.max_pixels") == 99
        assert config.get("keep_alive.restore_delay") == 0.1
        assert config.get("logging.level") == "INFO"

    def test_overrides_merge_with_defaults(self) -> None:
        """Test that partial overrides keep the other defaults."""
        config = ConfigManager({"keep_alive": {"enabled": True}})

        assert config.get("keep_alive.enabled") is True
        assert config.get("keep_alive.max_pixels") == 99
        assert config.get("detector.checking_interval") == 120

    def test_get_missing_key_returns_default(self) -> None:
        """Test dot-notation lookup of unknown keys."""
        config = ConfigManager()

        assert config.get("nonexistent.key", "fallback") == "fallback"
        assert config.get("detector.checking_interval.deeper", 7) == 7

    def test_jitter_interval_defaults_to_half_counter_interval(self) -> None:
        """Test derived keep-alive period."""
        assert ConfigManager().jitter_interval == 0.5
        assert ConfigManager({"detector": {"counter_interval": 3}}).jitter_interval == 1.5

    def test_explicit_jitter_interval(self) -> None:
        """Test explicit keep-alive period."""
        config = ConfigManager({"keep_alive": {"jitter_interval": 0.25}})

        assert config.jitter_interval == 0.25

    @pytest.mark.parametrize(
        "overrides",
        [
            {"detector": {"checking_interval": 0}},
            {"detector": {"counter_interval": -1}},
            {"detector": {"checking_interval": "two minutes"}},
            {"keep_alive": {"enabled": "yes"}},
            {"keep_alive": {"min_pixels": 0}},
            {"logging": {"level": "VERBOSE"}},
            {"detector": {"unknown": 1}},
            {"network": {}},
        ],
    )
    def test_invalid_overrides_raise(self, overrides: dict) -> None:
        """Test schema validation."""
        with pytest.raises(ValueError, match="Invalid configuration"):
            ConfigManager(overrides)

    def test_min_pixels_above_max_raises(self) -> None:
        """Test the jitter range check."""
        with pytest.raises(ValueError, match="min_pixels"):
            ConfigManager({"keep_alive": {"min_pixels": 50, "max_pixels": 20}})

    @pytest.mark.parametrize("jitter_interval", [1, 2.5])
    def test_jitter_not_faster_than_counter_raises(self, jitter_interval: float) -> None:
        """Test the keep-alive cadence check."""
        with pytest.raises(ValueError, match="jitter_interval"):
            ConfigManager({"keep_alive": {"jitter_interval": jitter_interval}})

    @pytest.mark.parametrize("restore_delay", [1, 1.5])
    def test_restore_delay_not_shorter_than_counter_raises(self, restore_delay: float) -> None:
        """Test the restore window check."""
        with pytest.raises(ValueError, match="restore_delay"):
            ConfigManager({"keep_alive": {"restore_delay": restore_delay}})

    def test_timing_checks_follow_counter_interval(self) -> None:
        """Test a slower counter admits slower keep-alive timings."""
        config = ConfigManager(
            {
                "detector": {"counter_interval": 5},
                "keep_alive": {"jitter_interval": 2, "restore_delay": 1},
            }
        )

        assert config.jitter_interval == 2.0

    def test_to_dict_returns_copy(self) -> None:
        """Test that to_dict does not expose internal state."""
        config = ConfigManager()

        data = config.to_dict()
        data["keep_alive"]["enabled"] = True

        assert config.get("keep_alive.enabled") is False

    def test_defaults_not_mutated_by_overrides(self) -> None:
        """Test that overrides never leak into DEFAULT_CONFIG."""
        ConfigManager({"keep_alive": {"enabled": True}})

        assert ConfigManager.DEFAULT_CONFIG["keep_alive"]["enabled"] is False
