"""
Callback functions for list view pages.

This package contains all Dash callback functions organized by functionality:
- state: URL query string <-> control synchronization
- data_loading: Result, suggestion and redirect callbacks
- rendering: Table, summary and pagination rendering
"""

import logging
import time
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# Track registered (app, page) pairs to prevent duplicates
_registered_callbacks = set()
_registration_stats = {}

CALLBACK_MODULES = {
    'state': 'URL state synchronization',
    'data_loading': 'Result, suggestion and redirect loading',
    'rendering': 'Table rendering',
}


def register_all_callbacks(app, page) -> Dict[str, any]:
    """
    Register all callbacks of one list view page with the Dash app.

    Args:
        app: The Dash application instance
        page: ListViewPage whose components the callbacks drive

    Returns:
        Dict containing registration statistics and status
    """
    if not app:
        raise ValueError("Valid Dash app instance required for callback registration")

    key = (id(app), page.prefix)
    if key in _registered_callbacks:
        logger.debug(f"Callbacks for {page.prefix} already registered for this app instance")
        return _registration_stats.get(key, {})

    from . import data_loading, rendering, state
    modules = {
        'state': state,
        'data_loading': data_loading,
        'rendering': rendering,
    }

    start_time = time.time()
    registration_results = {
        'page': page.prefix,
        'modules': {},
        'success': False,
    }

    for module_name, module in modules.items():
        callbacks_before = len(app.callback_map)
        module.register_callbacks(app, page)
        registration_results['modules'][module_name] = {
            'callbacks_registered': len(app.callback_map) - callbacks_before,
            'description': CALLBACK_MODULES[module_name],
        }

    registration_results['success'] = True
    registration_results['duration_ms'] = round((time.time() - start_time) * 1000, 2)
    _registered_callbacks.add(key)
    _registration_stats[key] = registration_results

    logger.info(f"Registered {page.prefix} callbacks in {registration_results['duration_ms']}ms")
    return registration_results


def get_registration_stats(app_id: Optional[int] = None) -> Dict:
    """Registration statistics, optionally limited to one app id."""
    if app_id is None:
        return _registration_stats.copy()
    return {key: stats for key, stats in _registration_stats.items() if key[0] == app_id}


def is_registered(app, page) -> bool:
    return (id(app), page.prefix) in _registered_callbacks


def unregister_callbacks(app) -> None:
    """
    Forget registration records for an app (useful for testing).

    Dash has no API to remove callbacks, so this only clears the bookkeeping.
    """
    app_id = id(app)
    for key in [key for key in _registered_callbacks if key[0] == app_id]:
        _registered_callbacks.discard(key)
        _registration_stats.pop(key, None)
