"""
UI components for list view pages.

Layout builders, table rendering, and shared styling.
"""

from .components import (
    build_entity_link,
    create_list_view_layout,
    facet_to_radio,
    radio_to_facet,
    render_summary,
    render_table_body,
    sort_indicator,
)

__all__ = [
    'build_entity_link',
    'create_list_view_layout',
    'facet_to_radio',
    'radio_to_facet',
    'render_summary',
    'render_table_body',
    'sort_indicator',
]
