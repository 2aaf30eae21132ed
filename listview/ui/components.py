"""
Reusable UI components for list view pages.

Component ids are namespaced with the page prefix so the roles list and the
role audit page can register callbacks side by side.
"""

from typing import Optional

import dash_bootstrap_components as dbc
from dash import dcc, html

from ..fetching import Failed, FetchState, Loading, Ready
from ..helpers.formatters import format_total
from ..navigation import EntityLink
from ..page import FacetControl, ListViewPage
from ..state.models import ViewState
from .styles import CLASSES, ROW_HEIGHT_PX, SORT_ARROWS, STYLES

FACET_ALL = 'all'


def facet_to_radio(value: Optional[bool]) -> str:
    if value is None:
        return FACET_ALL
    return 'true' if value else 'false'


def radio_to_facet(value: Optional[str]) -> Optional[bool]:
    if value == 'true':
        return True
    if value == 'false':
        return False
    return None


def build_entity_link(link: EntityLink, children=None):
    """Router link; soft-deleted entities are struck through."""
    return dcc.Link(
        children if children is not None else link.label,
        href=link.path,
        style=STYLES['deleted_link'] if link.deleted else STYLES['plain_link'],
    )


def create_search_section(page: ListViewPage):
    """Free-text search box with live suggestions and a clear button."""
    return dbc.InputGroup([
        dcc.Input(
            id=page.component_id('search-input'),
            type='search',
            placeholder='Search',
            list=page.component_id('suggestions'),
            autoComplete='off',
            debounce=False,
            value='',
            className='form-control',
            style=STYLES['search_box'],
        ),
        html.Datalist(id=page.component_id('suggestions')),
        # Labels currently offered in the datalist; choosing one commits the search
        dcc.Store(id=page.component_id('suggestion-labels'), storage_type='memory', data=[]),
        dbc.Button('Clear', id=page.component_id('search-clear'), color='outline-secondary', n_clicks=0),
    ])


def create_facet_control(page: ListViewPage, facet: FacetControl):
    choices = [{'label': facet.true_label, 'value': 'true'}, {'label': facet.false_label, 'value': 'false'}]
    if not facet.true_first:
        choices.reverse()
    return dbc.RadioItems(
        id={'type': page.pattern_type('facet'), 'key': facet.key},
        options=[{'label': 'All', 'value': FACET_ALL}] + choices,
        value=FACET_ALL,
        inline=True,
    )


def sort_indicator(field: str, state: ViewState) -> str:
    if state.sort_field != field or state.sort_direction is None:
        return SORT_ARROWS['inactive']
    return SORT_ARROWS[state.sort_direction.value]


def create_table_header(page: ListViewPage):
    cells = []
    for column in page.columns:
        if column.sort_field:
            content = dbc.Button(
                [column.label, html.Span(id={'type': page.pattern_type('sort-indicator'),
                                             'field': column.sort_field})],
                id={'type': page.pattern_type('sort'), 'field': column.sort_field},
                color='link',
                n_clicks=0,
                style=STYLES['sort_button'],
            )
        else:
            content = column.label
        cells.append(html.Th(content, style={'textAlign': column.align} if column.align else None))
    return html.Thead(html.Tr(cells))


def create_pagination_footer(page: ListViewPage):
    spec = page.spec
    return dbc.Row([
        dbc.Col(html.Span(id=page.component_id('summary'), className=CLASSES['text_muted']), width='auto'),
        dbc.Col([
            html.Label('Rows per page', className='me-2'),
            dcc.Dropdown(
                id=page.component_id('page-size'),
                options=[{'label': str(size), 'value': size} for size in spec.page_size_options],
                value=spec.default_page_size,
                clearable=False,
                searchable=False,
                style={'width': '80px', 'display': 'inline-block', 'verticalAlign': 'middle'},
            ),
        ], width='auto'),
        dbc.Col(dbc.Pagination(
            id=page.component_id('pagination'),
            max_value=1,
            active_page=1,
            fully_expanded=False,
            first_last=True,
            previous_next=True,
        ), width='auto'),
    ], className=CLASSES['footer_row'], justify='end')


def create_list_view_layout(page: ListViewPage, heading, instance_id: str, path: str,
                            entity_id: Optional[str] = None):
    """
    Assemble the full list view: header controls, table, footer and stores.

    Args:
        page: Page description
        heading: Title component(s) shown top-left
        instance_id: Unique id for this mount of the page
        path: Pathname the page was mounted for
        entity_id: Parent entity id for nested lists (e.g. the role id)
    """
    controls = [dbc.Col(create_facet_control(page, facet), width='auto') for facet in page.facets]
    controls.append(dbc.Col(create_search_section(page), width='auto'))

    return dbc.Container([
        dbc.Row([
            dbc.Col(html.H3(heading), width='auto', className='me-auto'),
            *controls,
        ], className=CLASSES['header_row']),
        dbc.Table([
            create_table_header(page),
            html.Tbody(id=page.component_id('table-body')),
        ], bordered=False, hover=True, size='sm', className=CLASSES['table']),
        create_pagination_footer(page),

        # The query string of this location is the page's only durable state
        dcc.Location(id=page.component_id('location'), refresh=False),

        # Page-instance state; memory storage so every mount starts fresh
        dcc.Store(id=page.component_id('instance-id'), storage_type='memory', data=instance_id),
        dcc.Store(id=page.component_id('path'), storage_type='memory', data=path),
        dcc.Store(id=page.component_id('entity'), storage_type='memory', data=entity_id),
        dcc.Store(id=page.component_id('results'), storage_type='memory'),
        dcc.Store(id=page.component_id('redirect'), storage_type='memory'),
    ], fluid=True, style=STYLES['section_spacing'])


def _message_row(page: ListViewPage, children):
    return html.Tr(html.Td(children, colSpan=len(page.columns)))


def render_table_body(page: ListViewPage, fetch_state: FetchState, view_state: ViewState, ui_config=None):
    """
    Render table rows for a fetch outcome.

    Loading only appears before the first page arrives; afterwards the
    previous rows stay until the next outcome replaces them.
    """
    if isinstance(fetch_state, Loading):
        return [_message_row(page, [dbc.Spinner(size='sm'), ' Loading...'])]

    if isinstance(fetch_state, Failed):
        return [_message_row(page, dbc.Alert(
            f"Could not load {page.noun}s: {fetch_state.error}", color='danger', className='mb-0'
        ))]

    if isinstance(fetch_state, Ready):
        result_page = fetch_state.data
        if not result_page.results:
            return [_message_row(page, html.Span(f"No {page.noun}s found", className=CLASSES['text_muted']))]

        rows = [page.render_row(row, ui_config) for row in result_page.results]
        empty_rows = result_page.empty_rows(view_state.page_size)
        if empty_rows > 0:
            rows.append(html.Tr(html.Td(colSpan=len(page.columns)),
                                style={'height': f"{ROW_HEIGHT_PX * empty_rows}px"}))
        return rows

    return []


def render_summary(page: ListViewPage, fetch_state: FetchState) -> str:
    if isinstance(fetch_state, Ready):
        return format_total(fetch_state.data.total, page.noun)
    return ''

