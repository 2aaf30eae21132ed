import os
import sys
from pathlib import Path

import pytest
import toml

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config_manager import get_config, get_session_registry_settings, refresh_config
from core.config import ApiConfig, Config, LoggingConfig, StateConfig, UIConfig
from core.exceptions import ConfigurationError


# --- Test Cases for Config.load_config() ---

def test_load_config_creates_missing_file_with_defaults(tmp_path):
    config_path = tmp_path / "config.toml"
    config = Config(config_file_path=str(config_path))

    assert config_path.exists()
    saved = toml.load(config_path)
    assert saved['api']['base_url'] == 'http://localhost:6060'
    assert saved['ui']['page_size_options'] == [5, 10, 20]
    assert saved['state']['max_sessions'] == 500
    # An unset log file is omitted rather than written as an empty value
    assert 'log_file' not in saved['logging']
    assert config.log.log_file is None


def test_load_config_exists_and_valid(tmp_path):
    config_path = tmp_path / "config.toml"
    custom_values = {
        'api': {'base_url': 'https://access.example.com', 'timeout_seconds': 2.5, 'backend': 'http'},
        'ui': {'page_size_options': [10, 25, 50], 'default_page_size': 25, 'suggestion_limit': 5,
               'description_max_length': 80, 'cache_ttl_seconds': 5},
        'state': {'session_ttl_seconds': 60, 'max_sessions': 10},
        'logging': {'level': 'DEBUG', 'log_file': 'app.log'},
    }
    with open(config_path, 'w') as f:
        toml.dump(custom_values, f)

    config = Config(config_file_path=str(config_path))

    assert config.api.base_url == 'https://access.example.com'
    assert config.api.timeout_seconds == 2.5
    assert config.ui.page_size_options == (10, 25, 50)
    assert config.ui.default_page_size == 25
    assert config.ui.suggestion_limit == 5
    assert config.ui.description_max_length == 80
    assert config.state.max_sessions == 10
    assert config.log.level == 'DEBUG'
    assert config.log.log_file == 'app.log'


def test_load_config_partial_sections_keep_defaults(tmp_path):
    config_path = tmp_path / "config.toml"
    config_path.write_text('[api]\nbackend = "demo"\n')

    config = Config(config_file_path=str(config_path))

    assert config.api.backend == 'demo'
    assert config.api.base_url == 'http://localhost:6060'
    assert config.ui.default_page_size == 20


def test_load_config_malformed_toml(tmp_path):
    config_path = tmp_path / "config.toml"
    config_path.write_text("this is not [valid toml")

    with pytest.raises(ConfigurationError) as exc_info:
        Config(config_file_path=str(config_path))
    assert exc_info.value.context['config_file'] == str(config_path)


def test_load_config_invalid_values(tmp_path):
    config_path = tmp_path / "config.toml"
    config_path.write_text('[ui]\npage_size_options = [5, 10]\ndefault_page_size = 20\n')

    with pytest.raises(ConfigurationError, match="default_page_size"):
        Config(config_file_path=str(config_path))


def test_save_config_round_trip(tmp_path):
    config_path = tmp_path / "config.toml"
    config = Config(config_file_path=str(config_path))
    config.api.base_url = 'http://other:9000'
    config.log.log_file = 'browser.log'
    config.save_config()

    reloaded = Config(config_file_path=str(config_path))
    assert reloaded.api.base_url == 'http://other:9000'
    assert reloaded.log.log_file == 'browser.log'


def test_save_config_unwritable_path(tmp_path):
    config = Config(config_file_path=str(tmp_path / "config.toml"))
    config.config_file_path = str(tmp_path / "missing-dir" / "config.toml")

    with pytest.raises(ConfigurationError):
        config.save_config()


# --- Section validation ---

class TestSectionValidation:

    def test_defaults_are_valid(self):
        assert ApiConfig().validate() == []
        assert UIConfig().validate() == []
        assert StateConfig().validate() == []
        assert LoggingConfig().validate() == []

    def test_api_validation(self):
        assert ApiConfig(backend='grpc').validate()
        assert ApiConfig(base_url='').validate()
        assert ApiConfig(base_url='', backend='demo').validate() == []
        assert ApiConfig(timeout_seconds=0).validate()

    def test_ui_validation(self):
        assert UIConfig(page_size_options=()).validate()
        assert UIConfig(page_size_options=(0, 20)).validate()
        assert UIConfig(suggestion_limit=0).validate()
        assert UIConfig(description_max_length=3).validate()
        assert UIConfig(cache_ttl_seconds=0).validate()

    def test_state_validation(self):
        assert StateConfig(session_ttl_seconds=0).validate()
        assert StateConfig(max_sessions=-1).validate()

    def test_logging_validation(self):
        assert LoggingConfig(level='debug').validate() == []
        assert LoggingConfig(level='LOUD').validate()


# --- config_manager singleton ---

def test_get_config_is_singleton(isolated_state):
    config = get_config()
    assert config is get_config()
    assert config.config_file_path == isolated_state
    assert Path(isolated_state).exists()


def test_refresh_config_rereads_file(isolated_state):
    get_config()
    with open(isolated_state, 'w') as f:
        toml.dump({'state': {'session_ttl_seconds': 42, 'max_sessions': 7}}, f)

    refreshed = refresh_config()

    assert refreshed.state.session_ttl_seconds == 42
    assert get_session_registry_settings() == (42, 7)
