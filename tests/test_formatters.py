import os
import sys
from datetime import datetime, timezone

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from listview.helpers.formatters import (
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

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestTimestamps:

    def test_parse_timestamp(self):
        assert parse_timestamp('2024-05-01T00:00:00Z') == datetime(2024, 5, 1, tzinfo=timezone.utc)
        assert parse_timestamp('2024-05-01T00:00:00').tzinfo is timezone.utc
        assert parse_timestamp(None) is None
        assert parse_timestamp('') is None
        assert parse_timestamp('not a date') is None

    def test_membership_activity(self):
        assert is_membership_active({'ended_at': None}, NOW)
        assert is_membership_active({'ended_at': '2024-07-01T00:00:00Z'}, NOW)
        assert not is_membership_active({'ended_at': '2024-05-01T00:00:00Z'}, NOW)
        assert has_ended({'ended_at': '2024-05-01T00:00:00Z'}, NOW)

    def test_format_started(self):
        assert format_started({'created_at': '2024-03-05T10:00:00Z'}) == 'Mar 05, 2024'
        assert format_started({}) == ''

    def test_format_ending(self):
        assert format_ending({'ended_at': None}, NOW) == 'Never'
        assert format_ending({'ended_at': '2024-07-01T00:00:00Z'}, NOW) == 'Ends Jul 01, 2024'
        assert format_ending({'ended_at': '2024-05-01T00:00:00Z'}, NOW) == 'May 01, 2024'


class TestNames:

    @pytest.mark.parametrize('user, expected', [
        ({'display_name': 'Ada Lovelace', 'email': 'ada@example.com'}, 'Ada Lovelace'),
        ({'first_name': 'Grace', 'last_name': 'Hopper', 'email': 'g@example.com'}, 'Grace Hopper'),
        ({'email': 'alan@example.com'}, 'alan@example.com'),
        (None, ''),
    ])
    def test_display_user_name(self, user, expected):
        assert display_user_name(user) == expected

    def test_display_group_type(self):
        assert display_group_type({'type': 'okta_group'}) == 'Group'
        assert display_group_type({'type': 'app_group'}) == 'App Group'
        assert display_group_type({'type': 'custom_kind'}) == 'Custom Kind'
        assert display_group_type(None) == ''


class TestText:

    def test_truncate_description(self):
        text = 'x' * 120
        truncated = truncate_description(text, 115)
        assert truncated == 'x' * 114 + '...'
        assert truncate_description('x' * 115, 115) == 'x' * 115
        assert truncate_description(None) == ''

    def test_format_created_reason(self):
        assert format_created_reason('  Joined the team  ') == 'Joined the team'
        assert format_created_reason(None) == ''

    def test_format_total(self):
        assert format_total(1, 'role') == '1 role'
        assert format_total(0, 'role') == '0 roles'
        assert format_total(12, 'membership') == '12 memberships'
