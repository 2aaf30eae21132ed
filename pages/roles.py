"""
Roles list page.

Searchable, paginated list of all roles. A search that matches exactly one
role goes straight to that role's audit page.
"""

from typing import Optional

from dash import html

from config_manager import get_config
from listview.helpers import truncate_description
from listview.navigation import detail_path, entity_link
from listview.page import Column, ListViewPage
from listview.state.models import ListViewSpec
from listview.ui import build_entity_link, create_list_view_layout
from session_manager import generate_instance_id

PAGE_NAME = 'roles'


def fetch_roles(api, query):
    return api.list_roles(query)


def render_role_row(row: dict, ui_config=None):
    max_length = ui_config.description_max_length if ui_config else 115
    link = entity_link('role', row, row.get('name') or '')
    return html.Tr([
        html.Td(build_entity_link(link)),
        html.Td(build_entity_link(link, truncate_description(row.get('description'), max_length))),
    ], key=row.get('id'))


def build_page(ui_config=None) -> ListViewPage:
    """Describe the roles list; page size choices come from the [ui] config."""
    ui_config = ui_config or get_config().ui
    return ListViewPage(
        spec=ListViewSpec(
            name=PAGE_NAME,
            page_size_options=tuple(ui_config.page_size_options),
            default_page_size=ui_config.default_page_size,
        ),
        title='Roles',
        columns=(Column('Name'), Column('Description')),
        fetch_results=fetch_roles,
        fetch_suggestions=fetch_roles,
        render_row=render_role_row,
        redirect_path=lambda row: detail_path('role', row),
        noun='role',
    )


_page: Optional[ListViewPage] = None


def get_page() -> ListViewPage:
    global _page
    if _page is None:
        _page = build_page()
    return _page


def layout(pathname: str = '/roles'):
    """Create the roles list layout for one mount of the page."""
    page = get_page()
    return create_list_view_layout(page, page.title, generate_instance_id(), pathname)
