"""
User intents consumed by the reconciler.

Each UI event is translated into one of these messages before it touches the
query parameters, which keeps handlers replayable in tests without a browser.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class SortToggle:
    """Column header clicked."""
    field: str


@dataclass(frozen=True)
class PageChange:
    """Pagination control moved to a zero-based page index."""
    page_index: int


@dataclass(frozen=True)
class PageSizeChange:
    """Rows-per-page selector changed."""
    page_size: int


@dataclass(frozen=True)
class SearchCommit:
    """Search submitted; None clears the filter, '' filters by the empty string."""
    value: Optional[str]


@dataclass(frozen=True)
class FacetToggle:
    """Tri-state facet changed; None means 'both'."""
    key: str
    value: Optional[bool]


Intent = Union[SortToggle, PageChange, PageSizeChange, SearchCommit, FacetToggle]
