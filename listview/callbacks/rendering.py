"""
Table rendering callbacks for list views.
"""

import logging
from typing import Optional

from dash import Input, Output

from config_manager import get_config

from ..fetching import Ready, fetch_state_from_payload
from ..page import ListViewPage
from ..params import QueryParameterStore
from ..state.codec import decode_view_state
from ..state.models import ViewState
from ..ui.components import render_summary, render_table_body

logger = logging.getLogger(__name__)


def render_results(page: ListViewPage, results_payload: Optional[dict], ui_config=None):
    """
    Render the stored fetch outcome.

    Returns:
        Tuple of (table rows, summary text, pagination page count)
    """
    fetch_state = fetch_state_from_payload(results_payload)

    if isinstance(fetch_state, Ready):
        # Paginate with the page size the rows were fetched with
        view_state = decode_view_state(QueryParameterStore(dict(fetch_state.query)), page.spec)
        page_count = fetch_state.data.page_count(view_state.page_size)
    else:
        view_state = ViewState.default_for(page.spec)
        page_count = 1

    rows = render_table_body(page, fetch_state, view_state, ui_config)
    return rows, render_summary(page, fetch_state), page_count


def register_callbacks(app, page: ListViewPage):
    """Register rendering callbacks for a list view page."""

    def update_table(results_payload):
        return render_results(page, results_payload, get_config().ui)

    app.callback(
        [Output(page.component_id('table-body'), 'children'),
         Output(page.component_id('summary'), 'children'),
         Output(page.component_id('pagination'), 'max_value')],
        Input(page.component_id('results'), 'data')
    )(update_table)
