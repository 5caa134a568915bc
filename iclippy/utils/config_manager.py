"""Configuration management module"""

import copy
import os
from pathlib import Path
from typing import Dict, Any, Optional

import yaml
from platformdirs import user_config_dir
from loguru import logger

DEFAULTS_PATH = Path(__file__).parent.parent / 'config' / 'default_settings.yaml'

FALLBACK_CONFIG: Dict[str, Any] = {
    'clipboard': {
        'check_interval': 500,
    },
    'history': {
        'fetch_limit': 500,
    },
    'storage': {
        'database_path': None,
    },
    'logging': {
        'level': 'INFO',
        'file_logging': True,
        'retention': '7 days',
    },
}


class ConfigManager:
    """Manages application configuration"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager

        Args:
            config_path: Path to configuration file
        """
        if config_path is None:
            config_path = str(Path(user_config_dir('iClippy', appauthor=False)) / 'settings.yaml')

        self.config_path = config_path
        self.config: Dict[str, Any] = {}
        self._load_defaults()
        self._load_config()

    def _load_defaults(self):
        """Load default configuration"""
        self.config = copy.deepcopy(FALLBACK_CONFIG)

        try:
            if DEFAULTS_PATH.exists():
                with open(DEFAULTS_PATH, 'r', encoding='utf-8') as f:
                    self._merge_config(self.config, yaml.safe_load(f) or {})
                logger.debug("Loaded default configuration")
            else:
                logger.warning(f"Default config not found: {DEFAULTS_PATH}")

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load defaults: {e}")

    def _load_config(self):
        """Load user configuration"""
        try:
            if os.path.exists(self.config_path):
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    user_config = yaml.safe_load(f) or {}

                self._merge_config(self.config, user_config)
                logger.info(f"Loaded user configuration from {self.config_path}")

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load user config: {e}")

    def _merge_config(self, base: Dict, updates: Dict):
        """
        Recursively merge configuration dictionaries

        Args:
            base: Base configuration
            updates: Updates to apply
        """
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def save(self) -> bool:
        """Save current configuration to file"""
        try:
            os.makedirs(os.path.dirname(self.config_path) or '.', exist_ok=True)

            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self.config, f, default_flow_style=False)

            logger.info(f"Configuration saved to {self.config_path}")
            return True

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to save configuration: {e}")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            key: Configuration key (dot notation supported)
            default: Default value if not found

        Returns:
            Configuration value
        """
        value = self.config

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """
        Set configuration value

        Args:
            key: Configuration key (dot notation supported)
            value: Value to set
        """
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
        logger.debug(f"Set config: {key} = {value}")

    def reset(self):
        """Reset to default configuration"""
        self._load_defaults()
        logger.info("Configuration reset to defaults")

    def validate(self) -> bool:
        """
        Validate configuration

        Returns:
            True if valid
        """
        check_interval = self.get('clipboard.check_interval')
        fetch_limit = self.get('history.fetch_limit')

        if not isinstance(check_interval, (int, float)) or check_interval < 100:
            logger.error("Check interval too small (min 100ms)")
            return False

        if not isinstance(fetch_limit, int) or fetch_limit < 1:
            logger.error("History fetch limit must be a positive integer")
            return False

        level = self.get('logging.level')
        try:
            logger.level(level)
        except (TypeError, ValueError):
            logger.error(f"Unknown logging level: {level}")
            return False

        return True
