"""
Styling constants for list view pages.

Centralized so the roles list and the role audit table look the same.
"""

COLORS = {
    'primary': '#007bff',
    'muted': '#6c757d',
    'active_row': '#dcedc8',   # light green
    'ended_row': '#ffcdd2',    # light red
}

# Height of one table row; filler rows keep the footer from jumping
ROW_HEIGHT_PX = 33

STYLES = {
    'plain_link': {
        'textDecoration': 'none',
        'color': 'inherit',
    },
    'deleted_link': {
        'textDecoration': 'line-through',
        'color': 'inherit',
    },
    'sort_button': {
        'padding': 0,
        'color': 'inherit',
        'textDecoration': 'none',
        'fontWeight': 'bold',
    },
    'search_box': {
        'minWidth': '240px',
    },
    'section_spacing': {
        'marginTop': '20px',
        'marginBottom': '20px',
    },
}

CLASSES = {
    'table': 'table-sm',
    'header_row': 'align-items-center mb-3',
    'text_muted': 'text-muted',
    'footer_row': 'align-items-center mt-2',
}

SORT_ARROWS = {
    'asc': ' ▲',
    'desc': ' ▼',
    'inactive': '',
}
