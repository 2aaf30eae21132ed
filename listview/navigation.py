"""
Navigation rules and detail-view paths.

Detail views can be addressed by a human-readable slug or by a stable id.
Soft-deleted entities no longer own their slug, so they are always linked by
id and rendered struck through.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Set, Tuple

from .fetching import Ready
from .state.models import ResultPage, ViewState

logger = logging.getLogger(__name__)

# kind -> (url prefix, slug field)
DETAIL_ROUTES = {
    'role': ('/roles/', 'name'),
    'group': ('/groups/', 'name'),
    'user': ('/users/', 'email'),
}


@dataclass(frozen=True)
class EntityLink:
    path: str
    label: str
    deleted: bool = False


def is_deleted(entity: Optional[dict]) -> bool:
    return bool(entity) and entity.get('deleted_at') is not None


def detail_path(kind: str, entity: Optional[dict]) -> str:
    """
    Canonical detail path for a role, group or user.

    Args:
        kind: One of 'role', 'group', 'user'
        entity: Backend record; may be None or partial

    Returns:
        Path using the slug (name, or lowercased email for users), or the id
        when the entity is soft-deleted
    """
    prefix, slug_field = DETAIL_ROUTES[kind]
    entity = entity or {}
    if is_deleted(entity):
        return f"{prefix}{entity.get('id') or ''}"

    slug = entity.get(slug_field) or ''
    if kind == 'user':
        slug = slug.lower()
    return f"{prefix}{slug}"


def entity_link(kind: str, entity: Optional[dict], label: str) -> EntityLink:
    return EntityLink(path=detail_path(kind, entity), label=label, deleted=is_deleted(entity))


class SingleMatchRedirect:
    """
    Redirect to the detail view when a committed search matches exactly one row.

    The check runs on every render of a fetched page. It uses the search that
    is committed *now*, not the one the fetch was issued with, so a search
    cleared or changed while the request was in flight never redirects. A
    given (search, target) pair fires at most once per page instance.
    """

    def __init__(self, path_fn: Callable[[dict], str]):
        self.path_fn = path_fn
        self._fired: Set[Tuple[str, str]] = set()
        self._lock = threading.Lock()

    def target_for(self, current: ViewState, fetched_for: Optional[str], page: ResultPage) -> Optional[str]:
        """Pure condition check without the fire-once memory."""
        if current.search_query is None:
            return None
        if fetched_for != current.search_query:
            return None
        if not page.is_single_match:
            return None
        return self.path_fn(page.results[0])

    def check(self, current: ViewState, outcome) -> Optional[str]:
        """
        Decide whether to redirect after a fetch outcome was rendered.

        Args:
            current: View state derived from the URL at execution time
            outcome: FetchState accepted for the result list

        Returns:
            Target path to replace the current history entry with, or None
        """
        if not isinstance(outcome, Ready):
            return None

        target = self.target_for(current, outcome.search_query, outcome.data)
        if target is None:
            return None

        marker = (current.search_query, target)
        with self._lock:
            if marker in self._fired:
                return None
            self._fired.add(marker)

        logger.info(f"Single match for {current.search_query!r}, redirecting to {target}")
        return target

    def reset(self) -> None:
        with self._lock:
            self._fired.clear()
