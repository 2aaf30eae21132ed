import os
import sys
from datetime import datetime, timezone

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import api_client
import config_manager
import session_manager
from pages import role_audit, roles

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    """
    Give every test its own config file and fresh process-wide singletons:
    config, backend API, session registry and the cached page descriptions.
    """
    config_file = tmp_path / "config.toml"
    monkeypatch.setenv(config_manager.CONFIG_PATH_ENV, str(config_file))
    monkeypatch.setattr(config_manager, '_config_instance', None)
    monkeypatch.setattr(api_client, '_api_instance', None)
    monkeypatch.setattr(session_manager, '_registry_instance', None)
    monkeypatch.setattr(roles, '_page', None)
    monkeypatch.setattr(role_audit, '_page', None)
    yield str(config_file)


def _role(role_id, name, description='', deleted_at=None):
    return {'id': role_id, 'name': name, 'description': description, 'deleted_at': deleted_at}


def _group(group_id, name, group_type='okta_group', deleted_at=None):
    return {'id': group_id, 'name': name, 'type': group_type, 'description': '', 'deleted_at': deleted_at}


def _audit(audit_id, role_id, group_id, created_at, ended_at=None, is_owner=False, reason=''):
    return {
        'id': audit_id, 'role_id': role_id, 'group_id': group_id, 'is_owner': is_owner,
        'created_at': created_at, 'ended_at': ended_at,
        'created_actor_id': 'user-1', 'ended_actor_id': 'user-2' if ended_at else None,
        'created_reason': reason,
    }


@pytest.fixture
def small_api():
    """A hand-built in-memory backend with predictable rows."""
    roles_data = [
        _role('role-1', 'Engineering', 'All engineers'),
        _role('role-2', 'Engineering-Oncall', 'On-call rotation'),
        _role('role-3', 'Finance', 'Finance team'),
        _role('role-9', 'Retired', 'Old role', deleted_at='2024-01-01T00:00:00+00:00'),
    ]
    groups_data = [
        _group('group-1', 'AWS-Prod'),
        _group('group-2', 'GitHub-Org', 'app_group'),
        _group('group-3', 'Zendesk'),
        _group('group-4', 'Sentry', deleted_at='2024-02-01T00:00:00+00:00'),
    ]
    users_data = [
        {'id': 'user-1', 'email': 'Ada@Example.com', 'display_name': 'Ada Lovelace', 'deleted_at': None},
        {'id': 'user-2', 'email': 'grace@example.com', 'display_name': 'Grace Hopper',
         'deleted_at': '2024-03-01T00:00:00+00:00'},
    ]
    audits_data = [
        _audit('a1', 'role-1', 'group-1', '2024-01-10T00:00:00+00:00', is_owner=True, reason='Setup'),
        _audit('a2', 'role-1', 'group-2', '2024-03-05T00:00:00+00:00', ended_at='2024-05-01T00:00:00+00:00'),
        _audit('a3', 'role-1', 'group-3', '2024-02-20T00:00:00+00:00', ended_at='2024-07-01T00:00:00+00:00'),
        _audit('a4', 'role-1', 'group-4', '2023-12-01T00:00:00+00:00'),
        _audit('a5', 'role-2', 'group-1', '2024-04-01T00:00:00+00:00'),
    ]
    return api_client.InMemoryRoleApi(roles_data, groups_data, users_data, audits_data, now=NOW)


@pytest.fixture
def use_api(small_api):
    """Install small_api as the process-wide backend."""
    api_client.set_api(small_api)
    return small_api
