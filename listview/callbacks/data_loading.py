"""
Data loading callbacks for list views.

This module contains callbacks responsible for:
- Fetching the result page for the current URL state
- Fetching search suggestions for the raw search-box text
- Redirecting to a detail view when a committed search matches one row
"""

import logging
from typing import List, Optional

from dash import Input, Output, State, html, no_update

from session_manager import get_list_view_session

from ..fetching import fetch_state_from_payload
from ..page import ListViewPage
from ..params import QueryParameterStore
from ..state.codec import build_result_query, decode_view_state
from .state import is_mounted

logger = logging.getLogger(__name__)


def load_results(page: ListViewPage, search: Optional[str], instance_id: Optional[str],
                 entity_id: Optional[str] = None) -> Optional[dict]:
    """
    Fetch the result page for a query string.

    Query strings that decode to the request already issued for this page
    instance (for example `?page=x` and `?page=0`) do not fetch again.

    Returns:
        FetchState payload for the results store, or None when the request
        is unchanged or a newer request for the same page instance
        superseded this one
    """
    state = decode_view_state(QueryParameterStore.from_search(search), page.spec)
    entity = (page.entity_param, entity_id) if page.entity_param and entity_id else None
    query = build_result_query(state, page.spec, entity_param=entity)

    session = get_list_view_session(instance_id, page)
    if session.results.is_latest_query(query):
        logger.debug(f"{page.prefix}: view state unchanged, keeping current results")
        return None
    outcome = session.results.fetch(query)
    if outcome is None:
        return None
    return outcome.to_payload()


def load_suggestions(page: ListViewPage, text: Optional[str], instance_id: Optional[str]) -> Optional[List[str]]:
    """Suggestion labels for the typed text, or None when superseded."""
    session = get_list_view_session(instance_id, page)
    return session.suggestions.suggest(text)


def check_redirect(page: ListViewPage, results_payload: Optional[dict], search: Optional[str],
                   instance_id: Optional[str]) -> Optional[str]:
    """
    Redirect target after a result page was stored, or None.

    The committed search is read from the URL as it is now, not from the
    request that produced the results.
    """
    session = get_list_view_session(instance_id, page)
    if session.redirect is None:
        return None
    current = decode_view_state(QueryParameterStore.from_search(search), page.spec)
    return session.redirect.check(current, fetch_state_from_payload(results_payload))


REDIRECT_SCRIPT = """
function(redirect) {
    if (!redirect || !redirect.target) {
        return window.dash_clientside.no_update;
    }
    // Replace the current history entry so Back skips the search that redirected
    window.history.replaceState({}, '', redirect.target);
    window.dispatchEvent(new CustomEvent('_dashprivate_pushstate'));
    return window.dash_clientside.no_update;
}
"""


def register_callbacks(app, page: ListViewPage):
    """Register data loading callbacks for a list view page."""
    location = page.component_id('location')

    def update_results(search, pathname, mount_path, instance_id, entity_id):
        if not is_mounted(pathname, mount_path):
            return no_update
        payload = load_results(page, search, instance_id, entity_id)
        return no_update if payload is None else payload

    app.callback(
        Output(page.component_id('results'), 'data'),
        Input(location, 'search'),
        [State(location, 'pathname'),
         State(page.component_id('path'), 'data'),
         State(page.component_id('instance-id'), 'data'),
         State(page.component_id('entity'), 'data')]
    )(update_results)

    def update_suggestions(text, instance_id):
        labels = load_suggestions(page, text, instance_id)
        if labels is None:
            return no_update, no_update
        return [html.Option(value=label) for label in labels], labels

    app.callback(
        [Output(page.component_id('suggestions'), 'children'),
         Output(page.component_id('suggestion-labels'), 'data')],
        Input(page.component_id('search-input'), 'value'),
        State(page.component_id('instance-id'), 'data')
    )(update_suggestions)

    if page.redirect_path is None:
        return

    def redirect_on_single_match(results_payload, search, pathname, mount_path, instance_id):
        if not is_mounted(pathname, mount_path):
            return no_update
        target = check_redirect(page, results_payload, search, instance_id)
        if target is None:
            return no_update
        return {'target': target}

    app.callback(
        Output(page.component_id('redirect'), 'data'),
        Input(page.component_id('results'), 'data'),
        [State(location, 'search'),
         State(location, 'pathname'),
         State(page.component_id('path'), 'data'),
         State(page.component_id('instance-id'), 'data')],
        prevent_initial_call=True
    )(redirect_on_single_match)

    app.clientside_callback(
        REDIRECT_SCRIPT,
        Output(location, 'href'),
        Input(page.component_id('redirect'), 'data'),
        prevent_initial_call=True
    )
