"""
Tests for the list view callbacks.

The callback bodies are plain functions of (page, inputs), so they are
exercised directly with ctx.triggered-shaped dicts instead of a browser.
"""

import os
import sys
from dataclasses import replace
from unittest.mock import Mock

import dash
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from api_client import set_api
from core.exceptions import ApiError
from listview.callbacks import (
    CALLBACK_MODULES,
    get_registration_stats,
    is_registered,
    register_all_callbacks,
    unregister_callbacks,
)
from listview.callbacks.data_loading import check_redirect, load_results, load_suggestions
from listview.callbacks.rendering import render_results
from listview.callbacks.state import intents_from_triggers, is_mounted, parse_prop_id, reconcile_view
from listview.intents import FacetToggle, PageChange, SearchCommit, SortToggle
from listview.reconciler import Reconciler
from listview.state.models import ViewState
from pages import role_audit, roles


@pytest.fixture
def audit_page():
    return role_audit.build_page()


@pytest.fixture
def roles_page():
    return roles.build_page()


def trigger(prop_id, value=1):
    return {'prop_id': prop_id, 'value': value}


def reconcile(page, search, triggered, search_value='', offered=()):
    return reconcile_view(page, Reconciler(page.spec), search, triggered, search_value, offered)


class TestPropIds:

    def test_plain_id(self):
        assert parse_prop_id('roles-pagination.active_page') == ('roles-pagination', 'active_page')

    def test_pattern_id(self):
        component, prop = parse_prop_id('{"field":"moniker","type":"role-audit-sort"}.n_clicks')
        assert component == {'field': 'moniker', 'type': 'role-audit-sort'}
        assert prop == 'n_clicks'

    def test_is_mounted(self):
        assert is_mounted('/roles', '/roles')
        assert is_mounted(None, '/roles')
        assert not is_mounted('/roles/Ops', '/roles')


class TestIntentsFromTriggers:

    def test_control_echo_is_not_an_intent(self, audit_page):
        """Values written by the URL sync equal the current state and are ignored."""
        current = ViewState.default_for(audit_page.spec)
        triggered = [
            trigger('role-audit-pagination.active_page', 1),
            trigger('role-audit-page-size.value', 20),
            trigger('{"key":"active","type":"role-audit-facet"}.value', 'all'),
        ]
        assert intents_from_triggers(audit_page, triggered, current, '') == []

    def test_gestures(self, audit_page):
        current = ViewState.default_for(audit_page.spec)
        triggered = [
            trigger('{"field":"ended_at","type":"role-audit-sort"}.n_clicks', 2),
            trigger('role-audit-pagination.active_page', 3),
            trigger('{"key":"owner","type":"role-audit-facet"}.value', 'false'),
            trigger('role-audit-search-input.n_submit', 1),
        ]
        assert intents_from_triggers(audit_page, triggered, current, 'aws') == [
            SortToggle('ended_at'),
            PageChange(2),
            FacetToggle('owner', False),
            SearchCommit('aws'),
        ]

    def test_other_pages_components_are_ignored(self, audit_page):
        current = ViewState.default_for(audit_page.spec)
        assert intents_from_triggers(audit_page, [trigger('roles-pagination.active_page', 4)], current, '') == []

    def test_choosing_a_suggestion_commits_search(self, audit_page):
        current = ViewState.default_for(audit_page.spec)
        triggered = [trigger('role-audit-search-input.value', 'AWS-Prod')]
        assert intents_from_triggers(audit_page, triggered, current, 'AWS-Prod', ['AWS-Prod', 'GitHub-Org']) == [
            SearchCommit('AWS-Prod'),
        ]

    def test_typing_does_not_commit_search(self, audit_page):
        current = ViewState.default_for(audit_page.spec)
        triggered = [trigger('role-audit-search-input.value', 'AWS')]
        assert intents_from_triggers(audit_page, triggered, current, 'AWS', ['AWS-Prod']) == []
        assert intents_from_triggers(audit_page, triggered, current, 'AWS') == []

    def test_committed_suggestion_is_not_committed_again(self, audit_page):
        current = replace(ViewState.default_for(audit_page.spec), search_query='AWS-Prod')
        triggered = [trigger('role-audit-search-input.value', 'AWS-Prod')]
        assert intents_from_triggers(audit_page, triggered, current, 'AWS-Prod', ['AWS-Prod']) == []

    def test_disallowed_page_size_is_ignored(self, audit_page):
        current = ViewState.default_for(audit_page.spec)
        assert intents_from_triggers(audit_page, [trigger('role-audit-page-size.value', 15)], current, '') == []


class TestReconcileView:

    def test_location_change_drives_controls(self, audit_page):
        update = reconcile(audit_page, '?page=2&q=aws&active=false',
                           [trigger('role-audit-location.search', '?page=2&q=aws&active=false')])
        assert update.search is None
        assert update.state.page_index == 2
        assert update.state.facet('active') is False
        # Empty search box is initialized from q
        assert update.search_input == 'aws'

    def test_typed_text_is_not_overwritten_by_location(self, audit_page):
        update = reconcile(audit_page, '?q=aws', [trigger('role-audit-location.search', '?q=aws')], 'zen')
        assert update.search_input is None

    def test_initial_call(self, audit_page):
        update = reconcile(audit_page, None, [{'prop_id': '.', 'value': None}])
        assert update.search is None
        assert update.state == ViewState.default_for(audit_page.spec)

    def test_pagination_click_writes_page(self, audit_page):
        update = reconcile(audit_page, '?page=0', [trigger('role-audit-pagination.active_page', 3)])
        assert update.search == '?page=2'
        assert update.state.page_index == 2

    def test_pagination_echo_changes_nothing(self, audit_page):
        update = reconcile(audit_page, '', [trigger('role-audit-pagination.active_page', 1)])
        assert update.search is None

    def test_page_size_resets_page(self, audit_page):
        update = reconcile(audit_page, '?page=3&per_page=20', [trigger('role-audit-page-size.value', 10)])
        assert update.search == '?page=0&per_page=10'

    def test_sort_click(self, audit_page):
        update = reconcile(audit_page, '', [trigger('{"field":"moniker","type":"role-audit-sort"}.n_clicks')])
        assert update.search == '?order_by=moniker&order_desc=true'

    def test_facet_change(self, audit_page):
        update = reconcile(audit_page, '', [trigger('{"key":"active","type":"role-audit-facet"}.value', 'false')])
        assert update.search == '?active=false'

    def test_submit_commits_search_and_resets_page(self, audit_page):
        update = reconcile(audit_page, '?page=4', [trigger('role-audit-search-input.n_submit')], 'aws')
        assert update.search == '?page=0&q=aws'
        assert update.search_input is None

    def test_chosen_suggestion_commits_search(self, audit_page):
        update = reconcile(audit_page, '?page=3', [trigger('role-audit-search-input.value', 'GitHub-Org')],
                           'GitHub-Org', ['GitHub-Org'])
        assert update.search == '?page=0&q=GitHub-Org'

    def test_empty_submit_clears_search(self, audit_page):
        update = reconcile(audit_page, '?q=aws&page=1', [trigger('role-audit-search-input.n_submit')], '')
        assert update.search == '?page=1'
        assert update.search_input == ''

    def test_clear_button(self, audit_page):
        update = reconcile(audit_page, '?q=aws', [trigger('role-audit-search-clear.n_clicks')], 'aws')
        # Removing the last parameter yields an empty query string, not "no update"
        assert update.search == ''
        assert update.search_input == ''


class TestDataLoading:

    def test_load_results(self, roles_page, use_api):
        payload = load_results(roles_page, '?q=eng', 'instance-1')
        assert payload['status'] == 'ready'
        assert payload['total'] == 2
        assert payload['query'] == {'page': '0', 'per_page': '20', 'q': 'eng'}

    def test_unchanged_view_state_is_not_fetched_again(self, roles_page, small_api):
        api = Mock(wraps=small_api)
        set_api(api)

        assert load_results(roles_page, '?page=x', 'instance-1')['total'] == 3
        # Decodes to the same request as above
        assert load_results(roles_page, '?page=0', 'instance-1') is None
        assert load_results(roles_page, '?page=0&q=fin', 'instance-1')['total'] == 1

        assert api.list_roles.call_count == 2

    def test_load_results_for_role(self, audit_page, use_api):
        payload = load_results(audit_page, '?order_by=moniker&order_desc=false&per_page=5', 'instance-2', 'role-1')
        assert payload['query']['role_id'] == 'role-1'
        assert [row['group']['name'] for row in payload['results']] == ['AWS-Prod', 'GitHub-Org', 'Sentry', 'Zendesk']

    def test_load_results_failure(self, roles_page):
        api = Mock()
        api.list_roles.side_effect = ApiError("Could not connect to backend")
        set_api(api)

        payload = load_results(roles_page, '', 'instance-3')

        assert payload['status'] == 'failed'
        assert 'Could not connect' in payload['error']

    def test_load_suggestions(self, roles_page, audit_page, use_api):
        assert load_suggestions(roles_page, 'fin', 'instance-1') == ['Finance']
        # The audit page suggests group names
        assert load_suggestions(audit_page, 'o', 'instance-2') == ['AWS-Prod', 'GitHub-Org']

    def test_redirect_once_on_single_match(self, roles_page, use_api):
        payload = load_results(roles_page, '?q=fin', 'instance-1')
        assert check_redirect(roles_page, payload, '?q=fin', 'instance-1') == '/roles/Finance'
        assert check_redirect(roles_page, payload, '?q=fin', 'instance-1') is None

    def test_no_redirect_after_search_cleared(self, roles_page, use_api):
        payload = load_results(roles_page, '?q=fin', 'instance-1')
        assert check_redirect(roles_page, payload, '', 'instance-1') is None

    def test_audit_page_never_redirects(self, audit_page, use_api):
        payload = load_results(audit_page, '?q=git', 'instance-2', 'role-1')
        assert payload['total'] == 1
        assert check_redirect(audit_page, payload, '?q=git', 'instance-2') is None


class TestRendering:

    def test_render_ready(self, roles_page, use_api):
        payload = load_results(roles_page, '?q=fin&per_page=5', 'instance-1')
        rows, summary, page_count = render_results(roles_page, payload)
        # One result row plus one filler row for the remaining four
        assert len(rows) == 2
        assert rows[1].style == {'height': '132px'}
        assert summary == '1 role'
        assert page_count == 1

    def test_page_count(self, roles_page, use_api):
        payload = load_results(roles_page, '?per_page=5', 'instance-1')
        _, summary, page_count = render_results(roles_page, payload)
        assert summary == '3 roles'
        assert page_count == 1
        payload = {'status': 'ready', 'results': [{}] * 5, 'total': 12, 'query': {'per_page': '5'}}
        assert render_results(roles_page, payload)[2] == 3

    def test_render_loading_and_failed_differ(self, roles_page):
        loading_rows, loading_summary, _ = render_results(roles_page, None)
        failed_rows, failed_summary, _ = render_results(
            roles_page, {'status': 'failed', 'error': 'boom', 'query': {}}
        )
        assert loading_summary == failed_summary == ''
        assert 'Loading' in str(loading_rows[0])
        assert 'boom' in str(failed_rows[0])

    def test_render_empty(self, roles_page):
        rows, summary, _ = render_results(roles_page, {'status': 'ready', 'results': [], 'total': 0, 'query': {}})
        assert 'No roles found' in str(rows[0])
        assert summary == '0 roles'


class TestCallbackRegistration:

    def setup_method(self):
        self.app = dash.Dash(__name__, suppress_callback_exceptions=True)
        unregister_callbacks(self.app)

    def teardown_method(self):
        unregister_callbacks(self.app)

    def test_register_roles_page(self, roles_page):
        stats = register_all_callbacks(self.app, roles_page)

        assert stats['success'] is True
        assert set(stats['modules']) == set(CALLBACK_MODULES)
        assert stats['modules']['state']['callbacks_registered'] == 1
        assert stats['modules']['rendering']['callbacks_registered'] == 1
        # results, suggestions, redirect check and the client-side redirect
        assert stats['modules']['data_loading']['callbacks_registered'] == 4
        assert is_registered(self.app, roles_page)

    def test_register_audit_page(self, audit_page):
        stats = register_all_callbacks(self.app, audit_page)
        assert stats['modules']['data_loading']['callbacks_registered'] == 2

    def test_duplicate_registration_is_skipped(self, roles_page):
        first = register_all_callbacks(self.app, roles_page)
        callbacks = len(self.app.callback_map)

        second = register_all_callbacks(self.app, roles_page)

        assert second == first
        assert len(self.app.callback_map) == callbacks
        assert (id(self.app), 'roles') in get_registration_stats(id(self.app))

    def test_requires_app(self, roles_page):
        with pytest.raises(ValueError):
            register_all_callbacks(None, roles_page)
