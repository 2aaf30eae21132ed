"""
State management package for list views.

ViewState is derived from the URL query parameters on every change and is
never stored on its own.
"""

from .models import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_PAGE_SIZE_OPTIONS,
    ListViewSpec,
    ResultPage,
    SortDirection,
    ViewState,
)
from .codec import (
    build_result_query,
    build_suggestion_query,
    decode_view_state,
    encode_view_state,
    safe_int,
)

__all__ = [
    'DEFAULT_PAGE_SIZE',
    'DEFAULT_PAGE_SIZE_OPTIONS',
    'ListViewSpec',
    'ResultPage',
    'SortDirection',
    'ViewState',
    'build_result_query',
    'build_suggestion_query',
    'decode_view_state',
    'encode_view_state',
    'safe_int',
]
