"""
Backend API access for the role browser.

RoleApiClient talks JSON over HTTP to the access-management backend.
InMemoryRoleApi serves the same interface from pandas DataFrames and is used
for the --demo mode and in tests.
"""

import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pandas as pd
import requests

from core.exceptions import ApiError, NotFoundError

logger = logging.getLogger(__name__)

AUDIT_SORT_COLUMNS = ('moniker', 'created_at', 'ended_at')


class RoleApiClient:
    """HTTP client for the role, group and audit endpoints."""

    def __init__(self, base_url: str, timeout: float = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_role(self, role_id: str) -> dict:
        return self._get(f"/api/roles/{role_id}")

    def list_roles(self, query: Dict[str, str]) -> dict:
        return self._get("/api/roles", query)

    def list_role_audits(self, query: Dict[str, str]) -> dict:
        return self._get("/api/audit/groups_roles", query)

    def list_groups(self, query: Dict[str, str]) -> dict:
        return self._get("/api/groups", query)

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> dict:
        """
        Perform a GET request and decode the JSON body.

        Raises:
            NotFoundError: On HTTP 404
            ApiError: On transport failures, other non-200 statuses or invalid JSON
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise ApiError("Request timed out", url=url) from e
        except requests.exceptions.ConnectionError as e:
            raise ApiError("Could not connect to backend", url=url) from e
        except requests.exceptions.RequestException as e:
            raise ApiError(f"Request failed: {e}", url=url) from e

        if response.status_code == 404:
            raise NotFoundError("Not found", url=url, status_code=404)
        if response.status_code != 200:
            raise ApiError(f"Backend returned HTTP {response.status_code}", url=url,
                           status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ApiError("Backend returned invalid JSON", url=url, status_code=response.status_code) from e


def _to_bool(value: Optional[str]) -> Optional[bool]:
    if value == 'true':
        return True
    if value == 'false':
        return False
    return None


def _to_int(value: Optional[str], default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _records(frame: pd.DataFrame) -> List[Dict[str, Any]]:
    """DataFrame rows as plain dicts with missing values mapped to None."""
    records = []
    for record in frame.to_dict('records'):
        records.append({key: (None if _is_missing(value) else value) for key, value in record.items()})
    return records


def _is_missing(value) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Lists and other containers are never missing
        return False


def _paginate(frame: pd.DataFrame, query: Dict[str, str]) -> pd.DataFrame:
    page = max(_to_int(query.get('page'), 0), 0)
    per_page = max(_to_int(query.get('per_page'), 20), 1)
    start = page * per_page
    return frame.iloc[start:start + per_page]


class InMemoryRoleApi:
    """
    In-memory backend with the same interface as RoleApiClient.

    Filtering, sorting and paging follow the backend's semantics: q is a
    case-insensitive substring match, absent facets mean "both", and pages
    are zero-based.
    """

    def __init__(self, roles: List[dict], groups: List[dict], users: List[dict],
                 audits: List[dict], now: Optional[datetime] = None):
        self.roles = pd.DataFrame(roles, columns=['id', 'name', 'description', 'deleted_at'])
        self.groups = pd.DataFrame(groups, columns=['id', 'name', 'type', 'description', 'deleted_at'])
        self.users = pd.DataFrame(users, columns=['id', 'email', 'display_name', 'deleted_at'])
        self.audits = pd.DataFrame(audits, columns=[
            'id', 'role_id', 'group_id', 'is_owner', 'created_at', 'ended_at',
            'created_actor_id', 'ended_actor_id', 'created_reason',
        ])
        self.now = now
        self._groups_by_id = {g['id']: g for g in _records(self.groups)}
        self._users_by_id = {u['id']: u for u in _records(self.users)}

    def _now(self) -> pd.Timestamp:
        return pd.Timestamp(self.now or datetime.now(timezone.utc))

    def _find_role(self, role_id: Optional[str]) -> dict:
        # Roles are addressable by id or, while not deleted, by name
        matches = self.roles[self.roles['id'] == role_id]
        if matches.empty:
            matches = self.roles[(self.roles['name'] == role_id) & self.roles['deleted_at'].isna()]
        if matches.empty:
            raise NotFoundError("Role not found", url=f"/api/roles/{role_id}", status_code=404)
        return _records(matches.head(1))[0]

    def get_role(self, role_id: str) -> dict:
        return self._find_role(role_id)

    def list_roles(self, query: Dict[str, str]) -> dict:
        frame = self.roles[self.roles['deleted_at'].isna()]
        frame = self._search(frame, 'name', query.get('q'))
        frame = frame.sort_values('name', key=lambda col: col.str.lower(), kind='mergesort')
        return {'results': _records(_paginate(frame, query)), 'total': len(frame)}

    def list_groups(self, query: Dict[str, str]) -> dict:
        frame = self.groups[self.groups['deleted_at'].isna()]
        frame = self._search(frame, 'name', query.get('q'))
        frame = frame.sort_values('name', key=lambda col: col.str.lower(), kind='mergesort')
        return {'results': _records(_paginate(frame, query)), 'total': len(frame)}

    def list_role_audits(self, query: Dict[str, str]) -> dict:
        role = self._find_role(query.get('role_id'))

        frame = self.audits[self.audits['role_id'] == role['id']].copy()
        frame['moniker'] = frame['group_id'].map(
            lambda group_id: (self._groups_by_id.get(group_id) or {}).get('name') or ''
        )
        frame = self._search(frame, 'moniker', query.get('q'))

        ended_at = pd.to_datetime(frame['ended_at'], utc=True, format='ISO8601')
        is_active = ended_at.isna() | (ended_at > self._now())
        active = _to_bool(query.get('active'))
        if active is not None:
            frame = frame[is_active if active else ~is_active]

        owner = _to_bool(query.get('owner'))
        if owner is not None:
            frame = frame[frame['is_owner'].astype(bool) == owner]

        order_by = query.get('order_by', 'created_at')
        if order_by not in AUDIT_SORT_COLUMNS:
            order_by = 'created_at'
        descending = query.get('order_desc', 'true') == 'true'
        if order_by == 'moniker':
            sort_key = lambda col: col.str.lower()
        else:
            sort_key = lambda col: pd.to_datetime(col, utc=True, format='ISO8601')
        frame = frame.sort_values(order_by, ascending=not descending, key=sort_key,
                                  na_position='last', kind='mergesort')

        results = [self._expand_audit(row, role) for row in _records(_paginate(frame, query))]
        return {'results': results, 'total': len(frame)}

    def _expand_audit(self, row: dict, role: dict) -> dict:
        return {
            'id': row['id'],
            'role_group': role,
            'group': self._groups_by_id.get(row['group_id']),
            'is_owner': bool(row['is_owner']),
            'created_at': row['created_at'],
            'ended_at': row['ended_at'],
            'created_actor': self._users_by_id.get(row['created_actor_id']),
            'ended_actor': self._users_by_id.get(row['ended_actor_id']),
            'created_reason': row['created_reason'] or '',
        }

    @staticmethod
    def _search(frame: pd.DataFrame, column: str, q: Optional[str]) -> pd.DataFrame:
        if not q:
            return frame
        return frame[frame[column].str.contains(q, case=False, regex=False, na=False)]


def build_demo_api(now: Optional[datetime] = None, seed: int = 7) -> InMemoryRoleApi:
    """Build an InMemoryRoleApi seeded with a small, deterministic data set."""
    now = now or datetime.now(timezone.utc)
    rng = random.Random(seed)

    def stamp(days_ago: float) -> str:
        return (now - timedelta(days=days_ago)).isoformat()

    role_names = [
        ('App-Admins', 'Administrators of internal applications'),
        ('Engineering', 'All engineers, including contractors with repository access'),
        ('Engineering-Oncall', 'Engineers currently in the production on-call rotation'),
        ('Finance-Reviewers', 'Approvers for purchase orders and vendor payments'),
        ('Security', 'Security team members with access to audit tooling'),
        ('Support-Tier2', 'Escalation support with read access to customer accounts'),
    ]
    roles = [
        {'id': f"role-{i}", 'name': name, 'description': description, 'deleted_at': None}
        for i, (name, description) in enumerate(role_names, start=1)
    ]
    roles.append({'id': 'role-99', 'name': 'Legacy-Admins', 'description': 'Retired admin role',
                  'deleted_at': stamp(30)})

    group_names = ['GitHub-Org', 'AWS-Prod', 'AWS-Staging', 'PagerDuty', 'Grafana', 'Jira-Admins',
                   'Okta-Admins', 'Billing-Console', 'Zendesk', 'Vault-Operators', 'Snowflake-Analysts',
                   'Sentry']
    group_types = ['okta_group', 'app_group']
    groups = [
        {'id': f"group-{i}", 'name': name, 'type': group_types[i % 2], 'description': '',
         'deleted_at': stamp(10) if name == 'Sentry' else None}
        for i, name in enumerate(group_names, start=1)
    ]

    users = [
        {'id': f"user-{i}", 'email': f"{name.lower().replace(' ', '.')}@example.com",
         'display_name': name, 'deleted_at': stamp(5) if i == 4 else None}
        for i, name in enumerate(['Ada Lovelace', 'Grace Hopper', 'Alan Turing', 'Ken Thompson',
                                  'Barbara Liskov'], start=1)
    ]

    reasons = ['Quarterly access review', 'Joined the team', 'Incident response',
               'Requested via access request', '']
    audits = []
    for role in roles:
        for n in range(rng.randint(3, 14)):
            group = rng.choice(groups)
            started = rng.uniform(1, 400)
            ended = None
            if rng.random() < 0.4:
                # Ended in the past or scheduled to end in the future
                ended = stamp(rng.uniform(-30, started - 0.5))
            audits.append({
                'id': f"{role['id']}-audit-{n}",
                'role_id': role['id'],
                'group_id': group['id'],
                'is_owner': rng.random() < 0.3,
                'created_at': stamp(started),
                'ended_at': ended,
                'created_actor_id': rng.choice(users)['id'],
                'ended_actor_id': rng.choice(users)['id'] if ended else None,
                'created_reason': rng.choice(reasons),
            })

    logger.info(f"Demo backend seeded with {len(roles)} roles, {len(groups)} groups, {len(audits)} audit rows")
    return InMemoryRoleApi(roles, groups, users, audits, now=now)


# Global API instance - created from configuration on first use
_api_instance = None


def get_api():
    """Get the global backend API, creating it from configuration once."""
    global _api_instance
    if _api_instance is None:
        from config_manager import get_config

        config = get_config()
        if config.api.backend == 'demo':
            _api_instance = build_demo_api()
        else:
            _api_instance = RoleApiClient(config.api.base_url, timeout=config.api.timeout_seconds)
        logger.info(f"Using {config.api.backend} backend")
    return _api_instance


def set_api(api) -> None:
    """Replace the global backend API (used by --demo and tests)."""
    global _api_instance
    _api_instance = api
