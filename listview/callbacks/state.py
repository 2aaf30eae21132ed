"""
URL state synchronization callbacks for list views.

One callback per page owns the page's query string. User gestures on the
controls become intents, the Reconciler folds them into the next query
string, and every control is re-rendered from the decoded ViewState. Control
values that already match the URL produce no intent, which is what keeps the
URL -> control -> URL cycle from looping.
"""

import json
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from dash import ALL, Input, Output, State, ctx, no_update

from core.exceptions import ValidationError

from ..intents import FacetToggle, Intent, PageChange, PageSizeChange, SearchCommit, SortToggle
from ..page import ListViewPage
from ..params import QueryParameterStore
from ..reconciler import Reconciler
from ..state.codec import decode_view_state, safe_int
from ..state.models import ViewState
from ..ui.components import facet_to_radio, radio_to_facet, sort_indicator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewUpdate:
    """
    Result of one synchronization pass.

    Attributes:
        search: Next query string to push, or None to leave the URL alone
        state: View state the controls should show
        search_input: Text for the search box, or None to leave it alone
    """
    search: Optional[str]
    state: ViewState
    search_input: Optional[str] = None


def is_mounted(pathname: Optional[str], mount_path: Optional[str]) -> bool:
    """False once the location has moved to another route and this page is being replaced."""
    return pathname is None or pathname == mount_path


def parse_prop_id(prop_id: str):
    """Split a Dash prop id into (component id, property); pattern ids are decoded to dicts."""
    component, _, prop = prop_id.rpartition('.')
    if component.startswith('{'):
        return json.loads(component), prop
    return component, prop


def intents_from_triggers(page: ListViewPage, triggered: List[dict], current: ViewState,
                          search_value: Optional[str], offered: Sequence[str] = ()) -> List[Intent]:
    """
    Translate triggered control properties into intents.

    Value-carrying controls (pagination, page size, facets) are also written
    by the URL sync, so a value equal to the current state is not an intent.

    Args:
        page: Page the controls belong to
        triggered: ctx.triggered entries ({'prop_id': ..., 'value': ...})
        current: View state decoded from the URL before this gesture
        search_value: Raw text of the search box
        offered: Suggestion labels shown for the box when it changed

    Returns:
        Intents in trigger order
    """
    intents: List[Intent] = []
    for trigger in triggered:
        component, prop = parse_prop_id(trigger.get('prop_id', ''))
        value = trigger.get('value')

        if isinstance(component, dict):
            kind = component.get('type')
            if kind == page.pattern_type('sort') and prop == 'n_clicks' and value:
                intents.append(SortToggle(component['field']))
            elif kind == page.pattern_type('facet') and prop == 'value':
                facet = radio_to_facet(value)
                if facet != current.facet(component['key']):
                    intents.append(FacetToggle(component['key'], facet))

        elif component == page.component_id('pagination') and prop == 'active_page':
            page_index = safe_int(None if value is None else str(value), 1) - 1
            if page_index >= 0 and page_index != current.page_index:
                intents.append(PageChange(page_index))

        elif component == page.component_id('page-size') and prop == 'value':
            page_size = safe_int(None if value is None else str(value), current.page_size)
            if page_size != current.page_size and page_size in page.spec.page_size_options:
                intents.append(PageSizeChange(page_size))

        elif component == page.component_id('search-input') and prop == 'value':
            # Typing only commits when the text becomes one of the offered suggestions
            if value and value in offered and value != current.search_query:
                intents.append(SearchCommit(value))

        elif component == page.component_id('search-input') and prop == 'n_submit':
            # Submitting an empty box clears the filter
            intents.append(SearchCommit(search_value or None))

        elif component == page.component_id('search-clear') and prop == 'n_clicks' and value:
            intents.append(SearchCommit(None))

    return intents


def reconcile_view(page: ListViewPage, reconciler: Reconciler, search: Optional[str],
                   triggered: List[dict], search_value: Optional[str],
                   offered: Sequence[str] = ()) -> ViewUpdate:
    """
    Compute the next URL and control state for one callback invocation.

    A change of the location itself (navigation, back/forward, first mount)
    is authoritative: controls follow it and no intent is derived.
    """
    store = QueryParameterStore.from_search(search)
    current = decode_view_state(store, page.spec)

    location_id = page.component_id('location')
    url_driven = not triggered or any(
        trigger.get('prop_id') in ('.', '') or parse_prop_id(trigger['prop_id'])[0] == location_id
        for trigger in triggered
    )
    if url_driven:
        # The search box is only initialized from q while it is empty
        search_input = (current.search_query or '') if not search_value else None
        return ViewUpdate(search=None, state=current, search_input=search_input)

    intents = intents_from_triggers(page, triggered, current, search_value, offered or ())
    if not intents:
        return ViewUpdate(search=None, state=current)

    try:
        next_store = reconciler.replay(store, intents)
    except ValidationError as e:
        logger.warning(f"{page.prefix}: rejected {intents}: {e}")
        return ViewUpdate(search=None, state=current)

    cleared = any(isinstance(intent, SearchCommit) and intent.value is None for intent in intents)
    return ViewUpdate(
        search=None if next_store == store else next_store.to_search(),
        state=decode_view_state(next_store, page.spec),
        search_input='' if cleared else None,
    )


def register_callbacks(app, page: ListViewPage):
    """Register the URL synchronization callback for a list view page."""
    reconciler = Reconciler(page.spec)
    location = page.component_id('location')

    outputs = [
        Output(location, 'search'),
        Output(page.component_id('pagination'), 'active_page'),
        Output(page.component_id('page-size'), 'value'),
        Output(page.component_id('search-input'), 'value'),
    ]
    inputs = [
        Input(location, 'search'),
        Input(page.component_id('pagination'), 'active_page'),
        Input(page.component_id('page-size'), 'value'),
        Input(page.component_id('search-input'), 'value'),
        Input(page.component_id('search-input'), 'n_submit'),
        Input(page.component_id('search-clear'), 'n_clicks'),
    ]
    if page.facets:
        outputs.append(Output({'type': page.pattern_type('facet'), 'key': ALL}, 'value'))
        inputs.append(Input({'type': page.pattern_type('facet'), 'key': ALL}, 'value'))
    if page.spec.sortable:
        outputs.append(Output({'type': page.pattern_type('sort-indicator'), 'field': ALL}, 'children'))
        inputs.append(Input({'type': page.pattern_type('sort'), 'field': ALL}, 'n_clicks'))

    states = [
        State(page.component_id('suggestion-labels'), 'data'),
        State(location, 'pathname'),
        State(page.component_id('path'), 'data'),
    ]

    def sync_view_state(*args):
        search, search_value = args[0], args[3]
        offered, pathname, mount_path = args[-3:]
        if not is_mounted(pathname, mount_path):
            return [no_update] * len(outputs)

        update = reconcile_view(page, reconciler, search, ctx.triggered, search_value, offered)
        state = update.state

        result = [
            no_update if update.search is None else update.search,
            state.page_index + 1,
            state.page_size,
            no_update if update.search_input is None else update.search_input,
        ]
        position = len(result)
        if page.facets:
            result.append([facet_to_radio(state.facet(item['id']['key']))
                           for item in ctx.outputs_list[position]])
            position += 1
        if page.spec.sortable:
            result.append([sort_indicator(item['id']['field'], state)
                           for item in ctx.outputs_list[position]])
        return result

    app.callback(outputs, inputs, states)(sync_view_state)
