import copy
import os
from pathlib import Path
from typing import Dict, Any
import yaml
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'database': {
        'path': 'parkdash.db',
    },
    'dashboard': {
        'default_hours': 24,
        'history_hours': 100000,
        'infractions_limit': 50,
        'spot_marker': 'name',
    },
    'web': {
        'secret_key': 'change-me',
        'host': '127.0.0.1',
        'port': 3000,
        'debug': False,
    },
    'logging': {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'},
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'standard',
                'level': 'INFO',
            },
        },
        'root': {'handlers': ['console'], 'level': 'INFO'},
    },
}

ENV_OVERRIDES = {
    'PARKDASH_DB_PATH': ('database', 'path'),
    'PARKDASH_SECRET_KEY': ('web', 'secret_key'),
}


class ConfigLoader:
    """Handle loading and validation of configuration"""

    def __init__(self, config_path: str = None):
        """
        Initialize config loader

        Args:
            config_path: Path to custom config file (optional)
        """
        self.config_path = config_path or self._get_default_config_path()
        self.config = {}

    @staticmethod
    def _get_default_config_path() -> str:
        """Get path to default config file"""
        return os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            'config',
            'default_config.yaml'
        )

    def load(self) -> Dict[str, Any]:
        """
        Load and validate configuration

        Values from the file are layered over the built-in defaults, then
        PARKDASH_* environment variables are applied.

        Returns:
            Validated configuration dictionary
        """
        try:
            file_config = {}
            if Path(self.config_path).exists():
                with open(self.config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                logger.warning(f"Config file {self.config_path} not found, using defaults")

            self.config = self._merge(copy.deepcopy(DEFAULT_CONFIG), file_config)
            self._apply_env_overrides()
            self._validate_config()
            return self.config

        except Exception as e:
            logger.error(f"Error loading config from {self.config_path}: {str(e)}")
            raise

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(override, dict):
            raise ValueError("Configuration file must contain a mapping")
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict) and key != 'logging':
                base[key] = self._merge(base[key], value)
            else:
                base[key] = value
        return base

    def _apply_env_overrides(self) -> None:
        for env_name, (section, key) in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                self.config[section][key] = value

    def _validate_config(self):
        """Validate required configuration parameters"""
        required_sections = ['database', 'dashboard', 'web', 'logging']

        for section in required_sections:
            if not isinstance(self.config.get(section), dict):
                raise ValueError(f"Missing required config section: {section}")

        if not self.config['database'].get('path'):
            raise ValueError("Missing required database path")

        dashboard = self.config['dashboard']
        for key in ('default_hours', 'history_hours', 'infractions_limit'):
            if not isinstance(dashboard.get(key), int) or dashboard[key] <= 0:
                raise ValueError(f"dashboard.{key} must be a positive integer")

        if not dashboard.get('spot_marker'):
            raise ValueError("dashboard.spot_marker must be a non-empty string")


def load_config(config_path: str = None) -> Dict[str, Any]:
    return ConfigLoader(config_path).load()
