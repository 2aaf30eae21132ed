"""
Helper functions for list view pages.

Display formatting for roles, groups, users and audit rows.
"""

from .formatters import (
    display_group_type,
    display_user_name,
    format_created_reason,
    format_ending,
    format_started,
    format_total,
    has_ended,
    is_membership_active,
    parse_timestamp,
    truncate_description,
)

__all__ = [
    'display_group_type',
    'display_user_name',
    'format_created_reason',
    'format_ending',
    'format_started',
    'format_total',
    'has_ended',
    'is_membership_active',
    'parse_timestamp',
    'truncate_description',
]
