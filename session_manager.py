"""
Per-page-instance session state for list views.

Every mounted list view page gets a random instance id (kept in a
memory-backed dcc.Store) and its own ListViewSession: a result fetcher, a
suggestion fetcher, their response caches and the single-match redirect
guard. Nothing is shared between page instances.
"""

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from listview.cache import ResponseCache
from listview.fetching import ResultFetcher, SuggestionFetcher
from listview.navigation import SingleMatchRedirect
from listview.page import ListViewPage

logger = logging.getLogger(__name__)


@dataclass
class ListViewSession:
    """Fetch coordination state owned by one page instance."""
    instance_id: str
    page_name: str
    results: ResultFetcher
    suggestions: SuggestionFetcher
    redirect: Optional[SingleMatchRedirect] = None
    last_seen: float = field(default_factory=time.monotonic)

    @classmethod
    def create(cls, instance_id: str, page: ListViewPage, api, cache_ttl: float = 60,
               suggestion_limit: int = 10) -> 'ListViewSession':
        results = ResultFetcher(
            lambda query: page.fetch_results(api, query),
            cache=ResponseCache(ttl_seconds=cache_ttl),
            name=f"{page.prefix}:results",
        )
        suggestions = SuggestionFetcher(
            lambda query: page.fetch_suggestions(api, query),
            limit=suggestion_limit,
            label_key=page.suggestion_label_key,
            cache=ResponseCache(ttl_seconds=cache_ttl),
        )
        redirect = SingleMatchRedirect(page.redirect_path) if page.redirect_path else None
        return cls(instance_id, page.prefix, results, suggestions, redirect)


class SessionRegistry:
    """Thread-safe registry of ListViewSessions with idle expiry."""

    def __init__(self, ttl_seconds: float = 3600, max_sessions: int = 500):
        self.ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions
        self._sessions: Dict[str, ListViewSession] = {}
        self._lock = threading.RLock()

    def get_or_create(self, instance_id: str, page: ListViewPage, api,
                      cache_ttl: float = 60, suggestion_limit: int = 10) -> ListViewSession:
        key = f"{page.prefix}:{instance_id}"
        with self._lock:
            self._expire()
            session = self._sessions.get(key)
            if session is None:
                session = ListViewSession.create(instance_id, page, api, cache_ttl, suggestion_limit)
                self._sessions[key] = session
                logger.debug(f"Created list view session {key}")
                self._enforce_limit()
            session.last_seen = time.monotonic()
            return session

    def drop(self, instance_id: str, page: ListViewPage) -> bool:
        with self._lock:
            return self._sessions.pop(f"{page.prefix}:{instance_id}", None) is not None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _expire(self) -> None:
        cutoff = time.monotonic() - self.ttl_seconds
        expired = [key for key, session in self._sessions.items() if session.last_seen < cutoff]
        for key in expired:
            del self._sessions[key]
        if expired:
            logger.debug(f"Expired {len(expired)} idle list view sessions")

    def _enforce_limit(self) -> None:
        while len(self._sessions) > self.max_sessions:
            oldest = min(self._sessions, key=lambda key: self._sessions[key].last_seen)
            del self._sessions[oldest]
            logger.info(f"Evicted list view session {oldest}, limit is {self.max_sessions}")


# Global registry instance
_registry_instance: Optional[SessionRegistry] = None


def get_session_registry() -> SessionRegistry:
    global _registry_instance
    if _registry_instance is None:
        from config_manager import get_session_registry_settings

        ttl_seconds, max_sessions = get_session_registry_settings()
        _registry_instance = SessionRegistry(ttl_seconds, max_sessions)
    return _registry_instance


def reset_sessions():
    """Drop the global registry (useful for testing)."""
    global _registry_instance
    _registry_instance = None


def get_list_view_session(instance_id: Optional[str], page: ListViewPage) -> ListViewSession:
    """Get the session for a page instance, creating it with configured limits."""
    from api_client import get_api
    from config_manager import get_config

    config = get_config()
    return get_session_registry().get_or_create(
        instance_id or 'anonymous',
        page,
        get_api(),
        cache_ttl=config.ui.cache_ttl_seconds,
        suggestion_limit=config.ui.suggestion_limit,
    )


def generate_instance_id() -> str:
    """Generate a unique id for a mounted page instance."""
    return str(uuid.uuid4())
