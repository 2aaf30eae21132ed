"""
Configuration management for Role Audit Browser.

This module provides a split configuration system that separates concerns
into focused configuration classes, persisted to a single TOML file.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import toml

from .exceptions import ConfigurationError


@dataclass
class ApiConfig:
    """Configuration for the backend API the list views read from."""

    base_url: str = 'http://localhost:6060'
    timeout_seconds: float = 10.0
    backend: str = 'http'  # 'http' or 'demo'

    def validate(self) -> List[str]:
        """Validate the API configuration and return any errors."""
        errors = []

        if self.backend not in ('http', 'demo'):
            errors.append("backend must be one of ['http', 'demo']")

        if self.backend == 'http' and not self.base_url:
            errors.append("base_url cannot be empty for the http backend")

        if self.timeout_seconds <= 0:
            errors.append("timeout_seconds must be positive")

        return errors


@dataclass
class UIConfig:
    """Configuration for list view presentation and paging."""

    page_size_options: Tuple[int, ...] = (5, 10, 20)
    default_page_size: int = 20
    suggestion_limit: int = 10
    description_max_length: int = 115

    # Response cache lifetime for result and suggestion fetches
    cache_ttl_seconds: int = 60

    def validate(self) -> List[str]:
        """Validate the UI configuration and return any errors."""
        errors = []

        if not self.page_size_options:
            errors.append("page_size_options cannot be empty")
        elif any(size <= 0 for size in self.page_size_options):
            errors.append("page_size_options must all be positive")

        if self.default_page_size not in self.page_size_options:
            errors.append("default_page_size must be one of page_size_options")

        if self.suggestion_limit <= 0:
            errors.append("suggestion_limit must be positive")

        if self.description_max_length <= 3:
            errors.append("description_max_length must be greater than 3")

        if self.cache_ttl_seconds <= 0:
            errors.append("cache_ttl_seconds must be positive")

        return errors


@dataclass
class StateConfig:
    """Configuration for per-page-instance session state."""

    session_ttl_seconds: int = 3600
    max_sessions: int = 500

    def validate(self) -> List[str]:
        """Validate the state configuration and return any errors."""
        errors = []

        if self.session_ttl_seconds <= 0:
            errors.append("session_ttl_seconds must be positive")

        if self.max_sessions <= 0:
            errors.append("max_sessions must be positive")

        return errors


@dataclass
class LoggingConfig:
    """Configuration for application logging."""

    level: str = 'INFO'
    log_file: Optional[str] = None
    log_dir: str = 'logs'

    def validate(self) -> List[str]:
        errors = []
        if self.level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            errors.append("level must be a standard logging level name")
        return errors


@dataclass
class Config:
    """Main configuration class that combines all configuration sections."""

    config_file_path: str = "config.toml"

    api: ApiConfig = field(default_factory=ApiConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    state: StateConfig = field(default_factory=StateConfig)
    log: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Load configuration when an instance is created."""
        self.load_config()

    def to_dict(self) -> dict:
        """Render the configuration as the nested dict written to TOML."""
        logging_section = {
            'level': self.log.level,
            'log_dir': self.log.log_dir,
        }
        # TOML has no null, so an unset log file is simply omitted
        if self.log.log_file:
            logging_section['log_file'] = self.log.log_file

        return {
            'api': {
                'base_url': self.api.base_url,
                'timeout_seconds': self.api.timeout_seconds,
                'backend': self.api.backend,
            },
            'ui': {
                'page_size_options': list(self.ui.page_size_options),
                'default_page_size': self.ui.default_page_size,
                'suggestion_limit': self.ui.suggestion_limit,
                'description_max_length': self.ui.description_max_length,
                'cache_ttl_seconds': self.ui.cache_ttl_seconds,
            },
            'state': {
                'session_ttl_seconds': self.state.session_ttl_seconds,
                'max_sessions': self.state.max_sessions,
            },
            'logging': logging_section,
        }

    def save_config(self) -> None:
        """Save current configuration to TOML file."""
        try:
            with open(self.config_file_path, 'w') as f:
                toml.dump(self.to_dict(), f)
            logging.info(f"Configuration saved to {self.config_file_path}")
        except OSError as e:
            error_msg = f"Error saving configuration: {e}"
            logging.error(error_msg)
            raise ConfigurationError(error_msg, config_file=self.config_file_path)

    def load_config(self) -> None:
        """Load configuration from TOML file, creating it with defaults if missing."""
        try:
            with open(self.config_file_path) as f:
                config_data = toml.load(f)
        except FileNotFoundError:
            logging.info(f"{self.config_file_path} not found. Creating with default values.")
            self.save_config()
            return
        except toml.TomlDecodeError as e:
            error_msg = f"Error decoding {self.config_file_path}: {e}"
            logging.error(error_msg)
            raise ConfigurationError(error_msg, config_file=self.config_file_path)

        if 'api' in config_data:
            api_config = config_data['api']
            self.api.base_url = api_config.get('base_url', self.api.base_url)
            self.api.timeout_seconds = api_config.get('timeout_seconds', self.api.timeout_seconds)
            self.api.backend = api_config.get('backend', self.api.backend)

        if 'ui' in config_data:
            ui_config = config_data['ui']
            self.ui.page_size_options = tuple(ui_config.get('page_size_options', self.ui.page_size_options))
            self.ui.default_page_size = ui_config.get('default_page_size', self.ui.default_page_size)
            self.ui.suggestion_limit = ui_config.get('suggestion_limit', self.ui.suggestion_limit)
            self.ui.description_max_length = ui_config.get(
                'description_max_length', self.ui.description_max_length
            )
            self.ui.cache_ttl_seconds = ui_config.get('cache_ttl_seconds', self.ui.cache_ttl_seconds)

        if 'state' in config_data:
            state_config = config_data['state']
            self.state.session_ttl_seconds = state_config.get(
                'session_ttl_seconds', self.state.session_ttl_seconds
            )
            self.state.max_sessions = state_config.get('max_sessions', self.state.max_sessions)

        if 'logging' in config_data:
            logging_config = config_data['logging']
            self.log.level = logging_config.get('level', self.log.level)
            self.log.log_file = logging_config.get('log_file', self.log.log_file)
            self.log.log_dir = logging_config.get('log_dir', self.log.log_dir)

        errors = self.validate()
        if errors:
            error_msg = f"Invalid configuration in {self.config_file_path}: {'; '.join(errors)}"
            logging.error(error_msg)
            raise ConfigurationError(error_msg, config_file=self.config_file_path)

        logging.info(f"Configuration loaded from {self.config_file_path}")

    def validate(self) -> List[str]:
        """Validate all configuration sections and return any errors."""
        errors = []
        errors.extend(self.api.validate())
        errors.extend(self.ui.validate())
        errors.extend(self.state.validate())
        errors.extend(self.log.validate())
        return errors
