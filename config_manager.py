"""
Centralized configuration manager to avoid multiple Config instances.
"""
import os
from typing import Optional

from core.config import Config

# Global config instance - loaded once
_config_instance: Optional[Config] = None

CONFIG_PATH_ENV = 'ROLE_BROWSER_CONFIG'


def get_config() -> Config:
    """Get the global config instance, creating it only once."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config(config_file_path=os.environ.get(CONFIG_PATH_ENV, 'config.toml'))
    return _config_instance


def refresh_config():
    """Force a refresh of the global config instance."""
    global _config_instance
    _config_instance = None
    return get_config()


def get_session_registry_settings():
    """Get per-page session settings (ttl, max sessions) from the main config."""
    config = get_config()
    return config.state.session_ttl_seconds, config.state.max_sessions
