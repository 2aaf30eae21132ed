"""
Decode and encode ViewState to and from query parameters.

Decoding never raises: every malformed or unrecognized parameter resolves to
the page default, so a hand-edited or stale link always renders something.
"""

import logging
import re
from typing import Dict, Optional

from ..params import QueryParameterStore
from .models import (
    ORDER_BY,
    ORDER_DESC,
    PAGE,
    PER_PAGE,
    SEARCH,
    ListViewSpec,
    SortDirection,
    ViewState,
)

logger = logging.getLogger(__name__)

# ASCII digits only; int() alone accepts forms like '1_0' and '+5'
INTEGER_PATTERN = re.compile(r"-?[0-9]+\Z")


def safe_int(value: Optional[str], default: int) -> int:
    """Parse an ASCII base-10 integer, returning default for absent or non-numeric input."""
    if not isinstance(value, str):
        return default
    value = value.strip()
    if not INTEGER_PATTERN.match(value):
        return default
    return int(value, 10)


def decode_bool(value: Optional[str]) -> Optional[bool]:
    """Decode a tri-state facet value: 'true'/'false' or None for anything else."""
    if value == 'true':
        return True
    if value == 'false':
        return False
    return None


def encode_bool(value: bool) -> str:
    return 'true' if value else 'false'


def decode_view_state(store: QueryParameterStore, spec: ListViewSpec) -> ViewState:
    """
    Derive the typed view state from query parameters.

    Args:
        store: Current query parameters
        spec: Description of the page the parameters belong to

    Returns:
        ViewState with every field inside its declared domain
    """
    sort_field = None
    sort_direction = None
    if spec.sortable:
        sort_field = store.get(ORDER_BY, spec.default_sort_field)
        if sort_field not in spec.sort_fields:
            logger.debug(f"Ignoring unknown sort field {sort_field!r} on {spec.name}")
            sort_field = spec.default_sort_field
        # Absent order_desc means descending
        if store.get(ORDER_DESC, 'true') == 'true':
            sort_direction = SortDirection.DESCENDING
        else:
            sort_direction = SortDirection.ASCENDING

    facets = tuple((key, decode_bool(store.get(key))) for key in spec.facet_keys)

    page_index = max(safe_int(store.get(PAGE), 0), 0)
    page_size = safe_int(store.get(PER_PAGE), spec.default_page_size)
    if page_size not in spec.page_size_options:
        page_size = spec.default_page_size

    return ViewState(
        sort_field=sort_field,
        sort_direction=sort_direction,
        search_query=store.get(SEARCH),
        facets=facets,
        page_index=page_index,
        page_size=page_size,
    )


def encode_view_state(state: ViewState, spec: ListViewSpec) -> QueryParameterStore:
    """Render a view state as its canonical query parameters."""
    params: Dict[str, str] = {}
    if spec.sortable and state.sort_field is not None:
        params[ORDER_BY] = state.sort_field
        params[ORDER_DESC] = encode_bool(state.sort_direction is not SortDirection.ASCENDING)
    if state.search_query is not None:
        params[SEARCH] = state.search_query
    for key in spec.facet_keys:
        value = state.facet(key)
        if value is not None:
            params[key] = encode_bool(value)
    params[PAGE] = str(state.page_index)
    params[PER_PAGE] = str(state.page_size)
    return QueryParameterStore(params)


def build_result_query(state: ViewState, spec: ListViewSpec,
                       entity_param: Optional[tuple] = None) -> Dict[str, str]:
    """
    Build the request parameters for the primary result fetch.

    Optional fields that are unset are omitted entirely rather than sent as
    null, so the backend can tell "unset" from "explicitly false".

    Args:
        state: Current view state
        spec: Page description
        entity_param: Optional (name, value) pair identifying the parent
            entity, e.g. ('role_id', 'abc')

    Returns:
        Ordered dict of string request parameters
    """
    query: Dict[str, str] = {}
    if entity_param is not None:
        name, value = entity_param
        query[name] = str(value)
    query[PAGE] = str(state.page_index)
    query[PER_PAGE] = str(state.page_size)
    if spec.sortable and state.sort_field is not None:
        query[ORDER_BY] = state.sort_field
    if spec.sortable and state.sort_direction is not None:
        query[ORDER_DESC] = encode_bool(state.sort_direction.is_descending)
    if state.search_query is not None:
        query[SEARCH] = state.search_query
    for key in spec.facet_keys:
        value = state.facet(key)
        if value is not None:
            query[key] = encode_bool(value)
    return query


def build_suggestion_query(text: str, limit: int = 10) -> Dict[str, str]:
    """Request parameters for the search-suggestion lookup; independent of paging."""
    return {PAGE: '0', PER_PAGE: str(limit), SEARCH: text}
