"""
Query parameter store for list views.

The browser URL query string is the single source of truth for a list view.
QueryParameterStore is an immutable, ordered, versioned snapshot of those
parameters; every mutation goes through update() and yields a new store.
"""

import logging
from typing import Callable, Dict, Iterator, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, urlencode

logger = logging.getLogger(__name__)

Mutator = Callable[[Dict[str, str]], Optional[Mapping[str, object]]]


class QueryParameterStore:
    """
    Ordered string-to-string mapping mirrored into the URL query string.

    Absence of a key means "unset", which decoders treat as the default.
    Instances are never mutated in place; update() returns the next version.
    """

    __slots__ = ('_params', '_version')

    def __init__(self, params: Optional[Mapping[str, object]] = None, version: int = 0):
        # None values are treated as absent keys
        self._params: Tuple[Tuple[str, str], ...] = tuple(
            (str(key), str(value)) for key, value in (params or {}).items() if value is not None
        )
        self._version = version

    @classmethod
    def from_search(cls, search: Optional[str], version: int = 0) -> 'QueryParameterStore':
        """
        Build a store from a URL query string.

        Args:
            search: Query string with or without the leading '?'
            version: Version number to assign to the new store

        Returns:
            QueryParameterStore holding the parsed parameters. Blank values are
            kept, so '?q=' yields q == ''. Repeated keys keep the last value.
        """
        if not search:
            return cls(version=version)
        pairs = parse_qsl(search.lstrip('?'), keep_blank_values=True)
        return cls(dict(pairs), version=version)

    @property
    def version(self) -> int:
        return self._version

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        for name, value in self._params:
            if name == key:
                return value
        return default

    def as_dict(self) -> Dict[str, str]:
        """Return a mutable copy of the parameters in their original order."""
        return dict(self._params)

    def items(self) -> Tuple[Tuple[str, str], ...]:
        return self._params

    def update(self, mutator: Mutator) -> 'QueryParameterStore':
        """
        Apply one logical mutation and return the next store.

        The mutator receives a mutable copy of the current parameters and
        either returns the next parameter mapping or mutates the copy in place
        and returns None. All keys set within one call land in a single new
        version. If the result is identical to the current parameters the
        current store is returned unchanged, so no re-render is triggered.

        Args:
            mutator: Callable receiving a dict copy of the parameters

        Returns:
            The next QueryParameterStore (or self when nothing changed)
        """
        working = self.as_dict()
        result = mutator(working)
        next_params = working if result is None else result
        candidate = QueryParameterStore(next_params, version=self._version + 1)

        if candidate._params == self._params:
            return self

        logger.debug(f"Query parameters v{candidate.version}: {candidate.to_search()}")
        return candidate

    def to_search(self) -> str:
        """Render the canonical query string, e.g. '?page=0&per_page=20'."""
        if not self._params:
            return ''
        return '?' + urlencode(self._params)

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self._params)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __eq__(self, other: object) -> bool:
        # Equality is by content; the version only orders updates
        if not isinstance(other, QueryParameterStore):
            return NotImplemented
        return self._params == other._params

    def __hash__(self) -> int:
        return hash(self._params)

    def __repr__(self) -> str:
        return f"QueryParameterStore(v{self._version}, {dict(self._params)!r})"
