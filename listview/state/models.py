"""
State models for URL-synchronized list views.

ViewState is the typed, decoded view of a QueryParameterStore. It is never
mutated directly; the page re-derives it from the store on every change.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

# Canonical URL parameter names
ORDER_BY = 'order_by'
ORDER_DESC = 'order_desc'
SEARCH = 'q'
PAGE = 'page'
PER_PAGE = 'per_page'

DEFAULT_PAGE_SIZE_OPTIONS = (5, 10, 20)
DEFAULT_PAGE_SIZE = 20


class SortDirection(Enum):
    ASCENDING = 'asc'
    DESCENDING = 'desc'

    @property
    def is_descending(self) -> bool:
        return self is SortDirection.DESCENDING

    def flipped(self) -> 'SortDirection':
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


@dataclass(frozen=True)
class ListViewSpec:
    """
    Static description of one list view page.

    Attributes:
        name: Page identifier, also used as the Dash component id prefix
        sort_fields: Sortable column keys; empty for pages without sorting
        default_sort_field: Active sort field when order_by is absent
        facet_keys: URL keys of the tri-state boolean facet filters
        page_size_options: Allowed values for per_page
        default_page_size: per_page used when absent or invalid
    """
    name: str
    sort_fields: Tuple[str, ...] = ()
    default_sort_field: Optional[str] = None
    facet_keys: Tuple[str, ...] = ()
    page_size_options: Tuple[int, ...] = DEFAULT_PAGE_SIZE_OPTIONS
    default_page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        if self.sort_fields and self.default_sort_field not in self.sort_fields:
            raise ValueError(f"default_sort_field must be one of {self.sort_fields}")
        if self.default_page_size not in self.page_size_options:
            raise ValueError(f"default_page_size must be one of {self.page_size_options}")

    @property
    def sortable(self) -> bool:
        return bool(self.sort_fields)


@dataclass(frozen=True)
class ViewState:
    """Decoded list view state; a pure function of the query parameters."""
    sort_field: Optional[str] = None
    sort_direction: Optional[SortDirection] = None
    search_query: Optional[str] = None
    facets: Tuple[Tuple[str, Optional[bool]], ...] = ()
    page_index: int = 0
    page_size: int = DEFAULT_PAGE_SIZE

    def facet(self, key: str) -> Optional[bool]:
        """Return the tri-state value of a facet; None means 'both'."""
        return self.facet_map.get(key)

    @property
    def facet_map(self) -> Dict[str, Optional[bool]]:
        return dict(self.facets)

    @property
    def has_search(self) -> bool:
        return self.search_query is not None

    @classmethod
    def default_for(cls, spec: ListViewSpec) -> 'ViewState':
        """The state a page shows when its URL carries no parameters."""
        return cls(
            sort_field=spec.default_sort_field if spec.sortable else None,
            sort_direction=SortDirection.DESCENDING if spec.sortable else None,
            search_query=None,
            facets=tuple((key, None) for key in spec.facet_keys),
            page_index=0,
            page_size=spec.default_page_size,
        )


@dataclass(frozen=True)
class ResultPage:
    """One page of results plus the server-side total match count."""
    results: Tuple[dict, ...] = field(default_factory=tuple)
    total: int = 0

    @classmethod
    def from_payload(cls, payload: Optional[dict]) -> 'ResultPage':
        """Build from a backend response body such as {'results': [...], 'total': n}."""
        if not payload:
            return cls()
        results = tuple(payload.get('results') or ())
        total = payload.get('total')
        return cls(results=results, total=len(results) if total is None else int(total))

    def to_payload(self) -> dict:
        return {'results': list(self.results), 'total': self.total}

    @property
    def is_single_match(self) -> bool:
        return self.total == 1 and len(self.results) == 1

    def page_count(self, page_size: int) -> int:
        """Number of pages needed for total rows; at least one."""
        if page_size <= 0:
            return 1
        return max((self.total + page_size - 1) // page_size, 1)

    def empty_rows(self, page_size: int) -> int:
        """Filler rows keeping the table height stable on a short last page."""
        return max(page_size - len(self.results), 0)
