"""Runtime settings for Mouse Idle Stats."""

import copy
from typing import Any, Optional

from jsonschema import ValidationError, validate  # type: ignore[import-untyped]


class ConfigManager:
    """Hold and validate the monitor settings.

    Settings live in memory only: defaults merged with programmatic overrides
    (the CLI maps its single flag onto ``keep_alive.enabled``).
    """

    DEFAULT_CONFIG = {
        "detector": {
            "checking_interval": 120,
            "counter_interval": 1,
        },
        "keep_alive": {
            "enabled": False,
            "jitter_interval": None,
            "min_pixels": 10,
            "max_pixels": 99,
            "restore_delay": 0.1,
        },
        "logging": {
            "level": "INFO",
        },
    }

    CONFIG_SCHEMA = {
        "type": "object",
        "properties": {
            "detector": {
                "type": "object",
                "properties": {
                    "checking_interval": {"type": "number", "exclusiveMinimum": 0},
                    "counter_interval": {"type": "number", "exclusiveMinimum": 0},
                },
                "additionalProperties": False,
            },
            "keep_alive": {
                "type": "object",
                "properties": {
                    "enabled": {"type": "boolean"},
                    "jitter_interval": {"type": ["number", "null"], "exclusiveMinimum": 0},
                    "min_pixels": {"type": "integer", "minimum": 1},
                    "max_pixels": {"type": "integer", "minimum": 1},
                    "restore_delay": {"type": "number", "minimum": 0},
                },
                "additionalProperties": False,
            },
            "logging": {
                "type": "object",
                "properties": {
                    "level": {
                        "type": "string",
                        "enum": ["DEBUG", "INFO", "WARNING", "ERROR"],
                    },
                },
                "additionalProperties": False,
            },
        },
        "additionalProperties": False,
    }

    def __init__(self, overrides: Optional[dict[str, Any]] = None):
        """Initialize configuration manager.

        Args:
            overrides: Nested settings merged over the defaults

        Raises:
            ValueError: If the resulting configuration is invalid
        """
        self._config: dict[str, Any] = copy.deepcopy(self.DEFAULT_CONFIG)
        if overrides:
            self._deep_merge(self._config, overrides)
        self.validate()

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> None:
        """Deep merge override into base dictionary (in-place)."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., 'keep_alive.enabled')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            >>> config.get('detector.checking_interval')
            120
        """
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
            if value is None:
                return default
        return value

    def validate(self) -> bool:
        """Validate configuration against schema.

        Returns:
            True if valid

        Raises:
            ValueError: If configuration is invalid
        """
        try:
            validate(instance=self._config, schema=self.CONFIG_SCHEMA)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration: {e.message}")

        if self.get("keep_alive.min_pixels") > self.get("keep_alive.max_pixels"):
            raise ValueError("Invalid configuration: keep_alive.min_pixels exceeds max_pixels")

        # Keep-alive must offer, nudge and restore within one counter tick
        counter_interval = self.get("detector.counter_interval")
        if self.jitter_interval >= counter_interval:
            raise ValueError(
                "Invalid configuration: keep_alive.jitter_interval must be shorter "
                "than detector.counter_interval"
            )
        if self.get("keep_alive.restore_delay") >= counter_interval:
            raise ValueError(
                "Invalid configuration: keep_alive.restore_delay must be shorter "
                "than detector.counter_interval"
            )
        return True

    @property
    def jitter_interval(self) -> float:
        """Keep-alive tick period, half the counter interval unless set."""
        interval = self.get("keep_alive.jitter_interval")
        if interval is None:
            return float(self.get("detector.counter_interval")) / 2
        return float(interval)

    def to_dict(self) -> dict[str, Any]:
        """Get full configuration as dictionary.

        Returns:
            Copy of configuration dictionary
        """
        return copy.deepcopy(self._config)
