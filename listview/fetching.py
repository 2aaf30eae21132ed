"""
Fetch coordination for list views.

Two independent requests feed a list view: the primary result page, keyed by
the full view state, and the search-suggestion lookup, keyed only by the raw
text in the search box. Both follow last-query-wins: an outcome for a query
that has since been superseded is discarded instead of rendered.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from core.exceptions import ApiError, RoleBrowserError

from .cache import ResponseCache, query_key
from .state.codec import build_suggestion_query
from .state.models import SEARCH, ResultPage

logger = logging.getLogger(__name__)

FetchFn = Callable[[Dict[str, str]], Union[ResultPage, dict]]

# Errors from a broken fetch function that must still end in Failed rather than Loading
UNEXPECTED_FETCH_ERRORS = (ValueError, TypeError, KeyError, AttributeError)


@dataclass(frozen=True)
class FetchState:
    """Base of the tagged fetch outcome: Loading, Ready or Failed."""
    status: ClassVar[str] = 'unknown'

    def to_payload(self) -> dict:
        return {'status': self.status}


@dataclass(frozen=True)
class Loading(FetchState):
    status: ClassVar[str] = 'loading'


@dataclass(frozen=True)
class Ready(FetchState):
    status: ClassVar[str] = 'ready'
    data: ResultPage = field(default_factory=ResultPage)
    query: Tuple[Tuple[str, str], ...] = ()

    @property
    def search_query(self) -> Optional[str]:
        """The committed search this page was fetched for, if any."""
        return dict(self.query).get(SEARCH)

    def to_payload(self) -> dict:
        payload = self.data.to_payload()
        payload.update({'status': self.status, 'query': dict(self.query)})
        return payload


@dataclass(frozen=True)
class Failed(FetchState):
    status: ClassVar[str] = 'failed'
    error: str = ''
    query: Tuple[Tuple[str, str], ...] = ()

    def to_payload(self) -> dict:
        return {'status': self.status, 'error': self.error, 'query': dict(self.query)}


def fetch_state_from_payload(payload: Optional[dict]) -> FetchState:
    """Rebuild a FetchState from the dict stored in a dcc.Store."""
    if not payload:
        return Loading()

    status = payload.get('status')
    query = tuple((payload.get('query') or {}).items())
    if status == Ready.status:
        return Ready(data=ResultPage.from_payload(payload), query=query)
    if status == Failed.status:
        return Failed(error=payload.get('error', ''), query=query)
    return Loading()


def parse_result_page(response) -> ResultPage:
    """
    Validate a backend response body and wrap it in a ResultPage.

    Raises:
        ApiError: If the body is not {'results': [objects], 'total': int}
    """
    if isinstance(response, ResultPage):
        return response
    if not isinstance(response, dict):
        raise ApiError(f"Expected a JSON object, got {type(response).__name__}")

    results = response.get('results') or []
    if not isinstance(results, list) or not all(isinstance(row, dict) for row in results):
        raise ApiError("Response field 'results' must be a list of objects")
    total = response.get('total')
    if total is not None and (isinstance(total, bool) or not isinstance(total, int)):
        raise ApiError(f"Response field 'total' must be an integer, got {total!r}")
    return ResultPage.from_payload(response)


class ResultFetcher:
    """
    Issues fetches and accepts only the outcome of the most recent one.

    Callers either use fetch() directly or split it into issue() and
    resolve() when the request runs elsewhere. Ticket bookkeeping is guarded
    by a lock because Dash may run callbacks for one page on several threads.
    """

    def __init__(self, fetch_fn: FetchFn, cache: Optional[ResponseCache] = None, name: str = 'results'):
        self.fetch_fn = fetch_fn
        self.cache = cache
        self.name = name
        self._lock = threading.Lock()
        self._latest_ticket = 0
        self._resolved_ticket = 0
        self._latest_query: Optional[Dict[str, str]] = None
        self._current: FetchState = Loading()

    def issue(self, query: Mapping[str, str]) -> int:
        """Register a new request and return its ticket."""
        with self._lock:
            self._latest_ticket += 1
            ticket = self._latest_ticket
            self._latest_query = dict(query)
        logger.debug(f"{self.name}: issued #{ticket} {dict(query)}")
        return ticket

    def is_latest_query(self, query: Mapping[str, str]) -> bool:
        """True when query equals the parameters of the most recently issued request."""
        with self._lock:
            return self._latest_query == dict(query)

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._latest_ticket

    def resolve(self, ticket: int, outcome: FetchState) -> Optional[FetchState]:
        """
        Accept an outcome if its ticket is still the latest.

        Returns:
            The accepted outcome, or None when a newer request superseded it
        """
        with self._lock:
            if ticket != self._latest_ticket:
                logger.debug(f"{self.name}: discarded #{ticket}, latest is #{self._latest_ticket}")
                return None
            self._resolved_ticket = ticket
            self._current = outcome
        return outcome

    def fetch(self, query: Mapping[str, str]) -> Optional[FetchState]:
        """
        Fetch one page for the given request parameters.

        Returns:
            Ready or Failed for the latest request, None if superseded
        """
        query = dict(query)
        ticket = self.issue(query)
        frozen_query = tuple(query.items())

        try:
            page = self._load(query)
            outcome: FetchState = Ready(data=page, query=frozen_query)
        except RoleBrowserError as e:
            logger.warning(f"{self.name}: fetch failed for {query}: {e}")
            outcome = Failed(error=str(e), query=frozen_query)
        except UNEXPECTED_FETCH_ERRORS as e:
            logger.error(f"{self.name}: unexpected error fetching {query}: {e}", exc_info=True)
            outcome = Failed(error=str(e), query=frozen_query)

        return self.resolve(ticket, outcome)

    def _load(self, query: Dict[str, str]) -> ResultPage:
        key = query_key(query)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        response = self.fetch_fn(query)
        page = parse_result_page(response)

        if self.cache is not None:
            self.cache.set(key, page)
        return page

    @property
    def current(self) -> FetchState:
        """
        Last accepted outcome, or Loading before the first one.

        Once data has been shown this never falls back to Loading while a
        newer request is in flight (stale-while-revalidate).
        """
        with self._lock:
            return self._current

    @property
    def pending(self) -> bool:
        """True while the latest issued request has not been resolved."""
        with self._lock:
            return self._latest_ticket != self._resolved_ticket


class SuggestionFetcher:
    """
    Autocomplete lookup driven by the raw search-box text.

    Always requests the first `limit` matches, regardless of the main view's
    paging or sorting.
    """

    def __init__(self, fetch_fn: FetchFn, limit: int = 10, label_key: str = 'name',
                 cache: Optional[ResponseCache] = None):
        self.limit = limit
        self.label_key = label_key
        self._fetcher = ResultFetcher(fetch_fn, cache=cache, name='suggestions')

    def suggest(self, text: Optional[str]) -> Optional[List[str]]:
        """
        Return candidate labels for the typed text.

        Returns:
            Labels in backend order without duplicates, [] when the lookup
            failed, or None when a newer lookup superseded this one
        """
        outcome = self._fetcher.fetch(build_suggestion_query(text or '', self.limit))
        if outcome is None:
            return None
        if isinstance(outcome, Failed):
            return []

        labels: List[str] = []
        for row in outcome.data.results:
            label = row.get(self.label_key)
            if label and label not in labels:
                labels.append(label)
        return labels
