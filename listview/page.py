"""
Declarative description of a list view page.

A ListViewPage bundles everything the shared callbacks need to drive one
page: its state spec, its columns, how to fetch results and suggestions, how
to render a row, and the optional single-match redirect.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from .state.models import ListViewSpec


@dataclass(frozen=True)
class Column:
    """Table column; sort_field makes the header a sort toggle."""
    label: str
    sort_field: Optional[str] = None
    align: Optional[str] = None


@dataclass(frozen=True)
class FacetControl:
    """Tri-state facet rendered as All / true_label / false_label."""
    key: str
    true_label: str
    false_label: str
    # Order in which the two boolean options are shown
    true_first: bool = True


@dataclass(frozen=True)
class ListViewPage:
    """
    Attributes:
        spec: State spec; spec.name doubles as the component id prefix
        title: Heading shown above the table
        columns: Table columns in display order
        fetch_results: (api, query) -> {'results': [...], 'total': n}
        fetch_suggestions: (api, query) -> {'results': [...]}
        render_row: (row, ui_config) -> table row component
        facets: Facet controls shown in the header
        entity_param: Request parameter naming the parent entity, if any
        suggestion_label_key: Field of a suggestion row shown in the dropdown
        redirect_path: row -> detail path; enables the single-match redirect
        noun: Word used in the result count ("role", "membership")
    """
    spec: ListViewSpec
    title: str
    columns: Tuple[Column, ...]
    fetch_results: Callable[[Any, dict], Any]
    fetch_suggestions: Callable[[Any, dict], Any]
    render_row: Callable[[dict, Any], Any]
    facets: Tuple[FacetControl, ...] = ()
    entity_param: Optional[str] = None
    suggestion_label_key: str = 'name'
    redirect_path: Optional[Callable[[dict], str]] = None
    noun: str = 'result'

    @property
    def prefix(self) -> str:
        return self.spec.name

    def component_id(self, name: str) -> str:
        return f"{self.prefix}-{name}"

    def pattern_type(self, name: str) -> str:
        """Type key for pattern-matching ids such as {'type': ..., 'field': ...}."""
        return f"{self.prefix}-{name}"
