import dash_bootstrap_components as dbc
from dash import dcc, html


def layout(pathname: str = '', message: str = "The page you requested does not exist."):
    """Create the not-found view."""
    return dbc.Container([
        html.H3("Not Found", className="mt-4"),
        html.P(message, className="text-muted"),
        html.P(html.Code(pathname)) if pathname else None,
        dcc.Link("Back to roles", href="/roles"),
    ], fluid=True, id='not-found-page')
