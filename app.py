import argparse
import logging
import os
import threading
import time
import webbrowser

import dash
import dash_bootstrap_components as dbc
from dash import Input, Output, dcc, html, no_update

from config_manager import CONFIG_PATH_ENV, get_config
from core.logging_config import setup_logging
from pages import register_page_callbacks, resolve_page

logger = logging.getLogger(__name__)

app = dash.Dash(__name__, use_pages=False, external_stylesheets=[dbc.themes.FLATLY],
                suppress_callback_exceptions=True, title='Role Browser')

app.layout = dbc.Container([
    # Global location component; routing only looks at the pathname
    dcc.Location(id='global-location', refresh=False),
    dbc.Navbar(
        id='main-navbar',
        children=[
            dbc.Container([
                dbc.NavbarBrand("Role Browser", href="/roles", className="ms-2"),
                dbc.Nav([
                    dbc.NavItem(dbc.NavLink("Roles", href="/roles")),
                ], className="ms-auto", navbar=True),
            ], fluid=True)
        ],
        color="dark",
        dark=True,
        className="mb-2",
    ),
    html.Div(id='page-content'),
], fluid=True)


@app.callback(
    Output('page-content', 'children'),
    Input('global-location', 'pathname')
)
def display_page(pathname):
    """Mount the page for the current pathname"""
    if pathname is None:
        return no_update
    logger.debug(f"Routing {pathname}")
    return resolve_page(pathname)


def open_browser(url, delay=1.5):
    """Open browser after a delay"""
    def _open():
        time.sleep(delay)
        try:
            webbrowser.open(url)
        except webbrowser.Error as e:
            logger.warning(f"Could not open browser automatically: {e}")

    threading.Thread(target=_open, daemon=True).start()


def configure(config_path=None, demo=False):
    """Load configuration, set up logging, pick the backend and register callbacks."""
    if config_path:
        os.environ[CONFIG_PATH_ENV] = config_path

    config = get_config()
    setup_logging(level=config.log.level, log_file=config.log.log_file, log_dir=config.log.log_dir)

    if demo:
        from api_client import build_demo_api, set_api
        set_api(build_demo_api())
        logger.info("Running with the in-memory demo backend")

    register_page_callbacks(app)
    return config


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Role Browser - Role membership audit viewer')
    parser.add_argument('--no-browser', action='store_true',
                        help='Do not automatically open browser')
    parser.add_argument('--port', type=int, default=8050,
                        help='Port to serve on (default: 8050)')
    parser.add_argument('--demo', action='store_true',
                        help='Serve built-in demo data instead of calling the backend API')
    parser.add_argument('--config', default=None,
                        help='Path to the TOML configuration file (default: config.toml)')
    args = parser.parse_args()

    configure(args.config, demo=args.demo)

    url = f"http://127.0.0.1:{args.port}"
    if not args.no_browser:
        open_browser(url)

    app.run(debug=True, port=args.port, use_reloader=False)
