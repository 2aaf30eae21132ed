"""
Role audit page.

Group membership history of one role: which groups hold the role, who added
or removed them, and why. Sortable by group name, start and end date, and
filterable by active/inactive and owner/member.
"""

import logging
from datetime import datetime
from typing import Optional

from dash import html

from api_client import get_api
from config_manager import get_config
from core.exceptions import ApiError, NotFoundError
from listview.helpers import (
    display_group_type,
    display_user_name,
    format_created_reason,
    format_ending,
    format_started,
    has_ended,
    is_membership_active,
)
from listview.navigation import entity_link
from listview.page import Column, FacetControl, ListViewPage
from listview.state.models import ListViewSpec
from listview.ui import build_entity_link, create_list_view_layout
from listview.ui.styles import COLORS
from session_manager import generate_instance_id

from . import not_found

logger = logging.getLogger(__name__)

PAGE_NAME = 'role-audit'
SORT_FIELDS = ('moniker', 'created_at', 'ended_at')


def fetch_audits(api, query):
    return api.list_role_audits(query)


def fetch_groups(api, query):
    return api.list_groups(query)


def _user_cell(user: Optional[dict]):
    if not user:
        return ''
    return build_entity_link(entity_link('user', user, display_user_name(user)))


def render_audit_row(row: dict, ui_config=None, now: Optional[datetime] = None):
    """One membership audit row, shaded green while active and red once ended."""
    max_length = ui_config.description_max_length if ui_config else 115
    group = row.get('group') or {}
    group_link = entity_link('group', group, group.get('name') or '')

    # Deleted groups keep the struck-through name link only
    group_type = display_group_type(group)
    type_cell = group_type if group_link.deleted else build_entity_link(group_link, group_type)

    reason = row.get('created_reason')
    justification = html.Span(format_created_reason(reason, max_length), title=reason) if reason else None

    active = is_membership_active(row, now)
    return html.Tr([
        html.Td(build_entity_link(group_link)),
        html.Td(type_cell),
        html.Td('Owner' if row.get('is_owner') else 'Member'),
        html.Td(format_started(row)),
        html.Td(_user_cell(row.get('created_actor'))),
        html.Td(format_ending(row, now)),
        html.Td(_user_cell(row.get('ended_actor')) if has_ended(row, now) else ''),
        html.Td(justification),
    ], key=row.get('id'), style={'backgroundColor': COLORS['active_row'] if active else COLORS['ended_row']})


def build_page(ui_config=None) -> ListViewPage:
    ui_config = ui_config or get_config().ui
    return ListViewPage(
        spec=ListViewSpec(
            name=PAGE_NAME,
            sort_fields=SORT_FIELDS,
            default_sort_field='created_at',
            facet_keys=('active', 'owner'),
            page_size_options=tuple(ui_config.page_size_options),
            default_page_size=ui_config.default_page_size,
        ),
        title='Role Audit',
        columns=(
            Column('Group Name', sort_field='moniker'),
            Column('Group Type'),
            Column('Member or Owner'),
            Column('Started', sort_field='created_at'),
            Column('Added by'),
            Column('Ending', sort_field='ended_at'),
            Column('Removed by'),
            Column('Justification', align='center'),
        ),
        fetch_results=fetch_audits,
        fetch_suggestions=fetch_groups,
        render_row=render_audit_row,
        facets=(
            FacetControl('active', 'Active', 'Inactive'),
            FacetControl('owner', 'Owner', 'Member', true_first=False),
        ),
        entity_param='role_id',
        noun='membership',
    )


_page: Optional[ListViewPage] = None


def get_page() -> ListViewPage:
    global _page
    if _page is None:
        _page = build_page()
    return _page


def create_heading(role: dict):
    """Role name linked to its canonical path, struck through when deleted."""
    return [build_entity_link(entity_link('role', role, role.get('name') or '')), ' Role Audit']


def layout(role_id: str, pathname: str):
    """
    Create the audit layout for one role.

    The role is looked up once per mount; if it cannot be loaded the page
    shows the not-found view instead of an empty table.
    """
    try:
        role = get_api().get_role(role_id)
    except NotFoundError:
        logger.info(f"Role {role_id!r} not found")
        return not_found.layout(pathname, f"No role named {role_id!r}.")
    except ApiError as e:
        logger.warning(f"Could not load role {role_id!r}: {e}")
        return not_found.layout(pathname, f"Role {role_id!r} could not be loaded.")

    page = get_page()
    return create_list_view_layout(page, create_heading(role), generate_instance_id(), pathname,
                                   entity_id=role.get('id'))
