"""
Page routing for the role browser.

Pages are routed on the pathname only; query-string changes are handled by
the mounted page's own callbacks and never re-create its layout.
"""

from typing import Optional
from urllib.parse import unquote

from listview.callbacks import register_all_callbacks

from . import not_found, role_audit, roles

ROLES_PATHS = ('/', '/roles', '/roles/')
ROLE_PREFIX = '/roles/'


def resolve_page(pathname: Optional[str]):
    """Return the layout for a pathname."""
    if pathname in ROLES_PATHS:
        return roles.layout(pathname)

    if pathname and pathname.startswith(ROLE_PREFIX):
        role_id = unquote(pathname[len(ROLE_PREFIX):].rstrip('/'))
        if role_id and '/' not in role_id:
            return role_audit.layout(role_id, pathname)

    return not_found.layout(pathname or '')


def register_page_callbacks(app):
    """Register the callbacks of every list view page."""
    return {
        page.prefix: register_all_callbacks(app, page)
        for page in (roles.get_page(), role_audit.get_page())
    }
