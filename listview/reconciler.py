"""
Reconciliation engine for list views.

Translates user intents into query parameter updates and owns every reset
rule (which intents send the user back to the first page). Each handler
performs exactly one store update, so fetchers never observe a half-applied
intent.
"""

import logging
from typing import Iterable

from core.exceptions import ValidationError

from .intents import FacetToggle, Intent, PageChange, PageSizeChange, SearchCommit, SortToggle
from .params import QueryParameterStore
from .state.codec import decode_view_state, encode_bool
from .state.models import ORDER_BY, ORDER_DESC, PAGE, PER_PAGE, SEARCH, ListViewSpec, SortDirection

logger = logging.getLogger(__name__)


class Reconciler:
    """Applies intents for one list view page to its query parameters."""

    def __init__(self, spec: ListViewSpec):
        self.spec = spec

    def apply(self, store: QueryParameterStore, intent: Intent) -> QueryParameterStore:
        """
        Dispatch an intent to its handler.

        Args:
            store: Current query parameters
            intent: The user intent to apply

        Returns:
            The next store (the same store when the intent changes nothing)

        Raises:
            ValidationError: If the intent is unknown or carries an invalid value
        """
        if isinstance(intent, SortToggle):
            next_store = self.toggle_sort(store, intent.field)
        elif isinstance(intent, PageChange):
            next_store = self.change_page(store, intent.page_index)
        elif isinstance(intent, PageSizeChange):
            next_store = self.change_page_size(store, intent.page_size)
        elif isinstance(intent, SearchCommit):
            next_store = self.commit_search(store, intent.value)
        elif isinstance(intent, FacetToggle):
            next_store = self.toggle_facet(store, intent.key, intent.value)
        else:
            raise ValidationError("Unsupported intent", field='intent', value=type(intent).__name__)

        logger.debug(f"{self.spec.name}: {intent} -> {next_store.to_search() or '(no params)'}")
        return next_store

    def replay(self, store: QueryParameterStore, intents: Iterable[Intent]) -> QueryParameterStore:
        """Apply a sequence of intents in order."""
        for intent in intents:
            store = self.apply(store, intent)
        return store

    def toggle_sort(self, store: QueryParameterStore, field: str) -> QueryParameterStore:
        """
        Toggle sorting on a column.

        The active column flips direction; a different column becomes active
        sorted descending. The page index is kept.
        """
        if field not in self.spec.sort_fields:
            raise ValidationError(f"{self.spec.name} cannot sort by {field!r}", field=ORDER_BY, value=field)

        current = decode_view_state(store, self.spec)
        if current.sort_field == field:
            direction = current.sort_direction.flipped()
        else:
            direction = SortDirection.DESCENDING

        def mutate(params):
            params[ORDER_BY] = field
            params[ORDER_DESC] = encode_bool(direction.is_descending)

        return store.update(mutate)

    def change_page(self, store: QueryParameterStore, page_index: int) -> QueryParameterStore:
        if page_index < 0:
            raise ValidationError("Page index cannot be negative", field=PAGE, value=page_index)

        def mutate(params):
            params[PAGE] = str(page_index)

        return store.update(mutate)

    def change_page_size(self, store: QueryParameterStore, page_size: int) -> QueryParameterStore:
        """Set rows per page and return to the first page."""
        if page_size not in self.spec.page_size_options:
            raise ValidationError(
                f"Page size must be one of {self.spec.page_size_options}", field=PER_PAGE, value=page_size
            )

        def mutate(params):
            params[PAGE] = '0'
            params[PER_PAGE] = str(page_size)

        return store.update(mutate)

    def commit_search(self, store: QueryParameterStore, value) -> QueryParameterStore:
        """
        Commit a search value.

        None removes the q parameter entirely ("no filter"). Any string,
        including the empty string, is stored verbatim and resets paging.
        """
        if value is None:
            def mutate(params):
                params.pop(SEARCH, None)
        else:
            def mutate(params):
                params[PAGE] = '0'
                params[SEARCH] = value

        return store.update(mutate)

    def toggle_facet(self, store: QueryParameterStore, key: str, value) -> QueryParameterStore:
        if key not in self.spec.facet_keys:
            raise ValidationError(f"{self.spec.name} has no facet {key!r}", field=key, value=value)

        if value is None:
            def mutate(params):
                params.pop(key, None)
        else:
            def mutate(params):
                params[key] = encode_bool(bool(value))

        return store.update(mutate)
