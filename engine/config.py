"""
Configuration manager for the item catalog browser.

Handles loading and managing application configuration from YAML files.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from engine.craftability import (
    CraftabilityRules,
    DEFAULT_ALLOW_IDS,
    DEFAULT_ALLOW_SUFFIXES,
    DEFAULT_DENY_IDS,
    DEFAULT_DENY_SUBSTRINGS,
)
from utils.paths import CONFIG_PATH


class ConfigError(Exception):
    """Raised when an existing configuration file cannot be read."""


class ConfigManager:
    """Manages application configuration."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager."""
        self.logger = logging.getLogger(__name__)

        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = CONFIG_PATH

        self._config = None

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            self.logger.warning("Config file not found at %s, using defaults", self.config_path)
            self._config = self.get_default_config()
            return self._config

        try:
            with self.config_path.open('r', encoding='utf-8') as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self.logger.error("Failed to load configuration: %s", e)
            raise ConfigError(f"Cannot read {self.config_path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"{self.config_path} does not contain a mapping")

        # Merge with defaults to ensure all required keys exist
        self._config = self._merge_configs(self.get_default_config(), config)
        self.logger.info("Configuration loaded from %s", self.config_path)
        return self._config

    def get_config(self) -> Dict[str, Any]:
        """Get current configuration, loading if necessary."""
        if self._config is None:
            return self.load_config()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)."""
        value = self.get_config()
        try:
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any):
        """Set configuration value by key (supports dot notation)."""
        keys = key.split('.')
        current = self.get_config()

        # Navigate to the parent of the target key
        for k in keys[:-1]:
            if k not in current:
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value

    def save_config(self, config: Optional[Dict[str, Any]] = None, config_path: Optional[str] = None):
        """Save configuration to YAML file."""
        if config is not None:
            self._config = config

        if not self._config:
            self.logger.warning("No configuration to save")
            return

        save_path = Path(config_path) if config_path else self.config_path
        save_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            tmp_path = save_path.with_suffix(save_path.suffix + ".tmp")
            with open(tmp_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self._config, f, default_flow_style=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, save_path)

            self.logger.info("Configuration saved to %s", save_path)

        except Exception as e:
            self.logger.error("Failed to save configuration: %s", e)
            raise

    def get_default_config(self) -> Dict[str, Any]:
        """Return default configuration values."""
        return {
            'browser': {
                'items_per_row': 15,
                'rows_per_page': 20,
                'show_only_craftable': True,
            },
            'search': {
                'debounce_ms': 150,
            },
            'catalog': {
                'registry_path': None,
                'excluded_ids': ['air'],
            },
            'recipes': {
                'directory': None,
                'folders': ['recipes', 'smelting', 'blasting'],
                'base_url': None,
                'timeout_seconds': 5,
            },
            'craftability': {
                'fallback_lookups_per_pass': 64,
                'allow_ids': list(DEFAULT_ALLOW_IDS),
                'allow_suffixes': list(DEFAULT_ALLOW_SUFFIXES),
                'deny_substrings': list(DEFAULT_DENY_SUBSTRINGS),
                'deny_ids': list(DEFAULT_DENY_IDS),
            },
            'logging': {
                'level': 'INFO',
            },
        }

    def _merge_configs(self, default: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        """Merge user configuration with defaults."""
        result = copy.deepcopy(default)

        for key, value in user.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def get_log_level(self) -> str:
        """Get the console log level name, e.g. ``INFO``."""
        return str(self.get('logging.level', 'INFO')).upper()

    def get_page_size(self) -> int:
        """Get the number of entries per page (columns x rows)."""
        return int(self.get('browser.items_per_row', 15)) * int(self.get('browser.rows_per_page', 20))

    def get_debounce_ms(self) -> int:
        """Get the search debounce quiet interval in milliseconds."""
        return int(self.get('search.debounce_ms', 150))

    def get_fallback_lookups(self) -> int:
        """Get the synchronous oracle lookups allowed per filter pass."""
        return int(self.get('craftability.fallback_lookups_per_pass', 64))

    def get_craftability_rules(self) -> CraftabilityRules:
        """Build heuristic rules from the ``craftability`` section."""
        section = self.get('craftability', {}) or {}
        return CraftabilityRules.from_lists(
            allow_ids=section.get('allow_ids') or (),
            allow_suffixes=section.get('allow_suffixes') or (),
            deny_substrings=section.get('deny_substrings') or (),
            deny_ids=section.get('deny_ids') or (),
        )

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        config = self.get_config()

        for section in ('browser', 'search', 'craftability'):
            if section not in config:
                errors.append(f"Missing required section: {section}")

        for key in ('browser.items_per_row', 'browser.rows_per_page'):
            value = self.get(key)
            if not isinstance(value, int) or value <= 0:
                errors.append(f"{key} must be a positive integer")

        debounce = self.get('search.debounce_ms')
        if not isinstance(debounce, int) or debounce < 0:
            errors.append("search.debounce_ms must be a non-negative integer")

        fallback = self.get('craftability.fallback_lookups_per_pass')
        if not isinstance(fallback, int) or fallback < 0:
            errors.append("craftability.fallback_lookups_per_pass must be a non-negative integer")

        if not isinstance(logging.getLevelName(self.get_log_level()), int):
            errors.append("logging.level must be a standard logging level name")

        return errors
