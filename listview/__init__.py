"""
URL-synchronized list views.

The query string is the single source of truth for what a list view shows.
This package provides the parameter store, the typed view state decoded from
it, the reconciler that turns user intents into store updates, and the fetch
coordination that renders the result.

Dash callbacks live in listview.callbacks and are registered per page.
"""

from .fetching import Failed, FetchState, Loading, Ready, ResultFetcher, SuggestionFetcher
from .intents import FacetToggle, PageChange, PageSizeChange, SearchCommit, SortToggle
from .navigation import SingleMatchRedirect, detail_path, entity_link
from .page import Column, FacetControl, ListViewPage
from .params import QueryParameterStore
from .reconciler import Reconciler

__all__ = [
    'Column',
    'FacetControl',
    'FacetToggle',
    'Failed',
    'FetchState',
    'ListViewPage',
    'Loading',
    'PageChange',
    'PageSizeChange',
    'QueryParameterStore',
    'Ready',
    'Reconciler',
    'ResultFetcher',
    'SearchCommit',
    'SingleMatchRedirect',
    'SortToggle',
    'SuggestionFetcher',
    'detail_path',
    'entity_link',
]
