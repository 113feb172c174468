# parkdash/logging_config.py
import logging.config
from typing import Any, Dict

from .config_loader import load_config


def setup_logging(config_path: str = None, config: Dict[str, Any] = None):
    """Setup logging configuration"""
    if config is None:
        config = load_config(config_path)

    logging.config.dictConfig(config['logging'])

    return logging.getLogger(__name__)
